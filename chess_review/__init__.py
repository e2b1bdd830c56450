"""
chess_review

Game review on top of an external UCI chess engine: evaluate every
position of a game and summarize each side's accuracy.

## Architecture

1. **engine**: UCI engine client
   - Transport to the engine process (stdin/stdout lines)
   - CommandSequencer: one command batch at a time, up to a terminal line
   - EngineSession: handshake, new game, position search, shutdown

2. **analysis**: Results and aggregation
   - ResponseParser: search output → ranked principal variations
   - GameEvaluator: positions of a game → GameEval
   - Accuracy: per-side percentage from principal-line scores

3. **data**: Game sources
   - PGN loading into the ordered positions to evaluate

4. **utils**: Logging setup

## Quick Start

```python
from chess_review import EngineConfig, EngineSession, GameEvaluator, load_game

record = load_game(open("game.pgn").read())

with EngineSession.create(EngineConfig(depth=14)) as session:
    game_eval = GameEvaluator(session).evaluate_game(record.fens)

print(game_eval.accuracy.white, game_eval.accuracy.black)
```

### From the command line

```bash
python tools/review_game.py game.pgn --depth 14
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chess_review.config import EngineConfig
from chess_review.engine import EngineSession, EngineState
from chess_review.analysis import GameEval, GameEvaluator, LineEval, MoveEval
from chess_review.data import GameRecord, load_game, load_game_file

__all__ = [
    "EngineConfig",
    "EngineSession",
    "EngineState",
    "GameEval",
    "GameEvaluator",
    "LineEval",
    "MoveEval",
    "GameRecord",
    "load_game",
    "load_game_file",
]
