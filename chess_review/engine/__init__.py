"""
UCI Engine Client

Drives an external UCI engine (such as Stockfish) over its stdin/stdout
text protocol.

Layers:
    transport: line channel to the engine process
    sequencer: one command batch at a time, collected up to a terminal line
    session:   lifecycle state machine and the UCI requests built on top

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from chess_review.engine.errors import (
    EngineError,
    GameEvaluationError,
    InitializationError,
    InvalidState,
    RequestTimeout,
    TransportClosed,
)
from chess_review.engine.sequencer import CommandSequencer
from chess_review.engine.session import EngineSession, EngineState
from chess_review.engine.transport import SubprocessTransport, Transport, find_engine

__all__ = [
    "EngineError",
    "GameEvaluationError",
    "InitializationError",
    "InvalidState",
    "RequestTimeout",
    "TransportClosed",
    "CommandSequencer",
    "EngineSession",
    "EngineState",
    "SubprocessTransport",
    "Transport",
    "find_engine",
]
