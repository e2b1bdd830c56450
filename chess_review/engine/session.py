"""
Engine Session

Owns one engine process and its lifecycle:

    UNINITIALIZED → INITIALIZING → READY ↔ EVALUATING → TERMINATED

shutdown() is reachable from every state and is idempotent.

Protocol Flow:
    Session → "uci"
    Engine  → "id name Stockfish 16"
    Engine  → "uciok"
    Session → "setoption name MultiPV value 3"
    Session → "isready"
    Engine  → "readyok"
    Session → "position fen <FEN>"
    Session → "go depth 16"
    Engine  → "info depth 16 multipv 1 score cp 25 pv e2e4 ..."
    Engine  → "bestmove e2e4"

Example:
    with EngineSession.create(EngineConfig(depth=12)) as session:
        move_eval = session.evaluate_position(chess.STARTING_FEN)
"""

import logging
import threading
from enum import Enum
from typing import List, Optional

from chess_review.analysis.parser import MoveEval, parse_response
from chess_review.config import EngineConfig
from chess_review.engine.errors import (
    EngineError,
    InitializationError,
    InvalidState,
    TransportClosed,
)
from chess_review.engine.sequencer import CommandSequencer
from chess_review.engine.transport import SubprocessTransport, Transport

logger = logging.getLogger(__name__)


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    EVALUATING = "evaluating"
    TERMINATED = "terminated"


class EngineSession:
    """
    A single UCI engine driven through a serialized command channel.

    Attributes:
        config: Engine configuration
        transport: Channel to the engine process
        sequencer: Serializes command batches on the transport
        engine_name: Name reported by the engine during the handshake
        engine_author: Author reported by the engine during the handshake
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Start the engine channel. Does not wait for the engine.

        Args:
            transport: Channel to use (default: subprocess for config.engine_path)
            config: Engine configuration (uses defaults if None)

        Raises:
            FileNotFoundError: If no engine binary can be found
        """
        self.config = config or EngineConfig()
        self.transport = transport or SubprocessTransport(self.config.engine_path)
        self.sequencer = CommandSequencer(
            self.transport, timeout=self.config.request_timeout
        )

        self.engine_name: Optional[str] = None
        self.engine_author: Optional[str] = None

        self._state = EngineState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._active_requests = 0

        self.sequencer.start()
        logger.info(f"Engine session created: {self.transport!r}")

    @classmethod
    def create(
        cls,
        config: Optional[EngineConfig] = None,
        transport: Optional[Transport] = None,
    ) -> "EngineSession":
        """Create a session in the UNINITIALIZED state."""
        return cls(transport=transport, config=config)

    @property
    def state(self) -> EngineState:
        return self._state

    def is_ready(self) -> bool:
        """True only when the session is idle and initialized."""
        return self._state is EngineState.READY

    def initialize(self) -> None:
        """
        Run the UCI handshake and apply engine options.

        Raises:
            InvalidState: If the session was already initialized or shut down
            InitializationError: If the engine does not complete the handshake
                within config.init_timeout; the session is shut down
        """
        with self._state_lock:
            if self._state is not EngineState.UNINITIALIZED:
                raise InvalidState(f"Cannot initialize a session that is {self._state.value}")
            self._state = EngineState.INITIALIZING

        timeout = self.config.init_timeout
        try:
            lines = self.sequencer.send_commands(["uci"], "uciok", timeout=timeout)
            self._read_identity(lines)
            self.sequencer.send_commands(
                self._option_commands() + ["isready"], "readyok", timeout=timeout
            )
        except EngineError as e:
            logger.error(f"Engine handshake failed: {e}")
            self.shutdown()
            raise InitializationError(f"Engine handshake failed: {e}") from e

        with self._state_lock:
            if self._state is not EngineState.INITIALIZING:
                raise InitializationError("Session was shut down during the handshake")
            self._state = EngineState.READY

        logger.info(
            f"Engine initialized: {self.engine_name or 'unknown engine'} "
            f"(multipv={self.config.multipv}, threads={self.config.threads})"
        )

    def _read_identity(self, lines: List[str]) -> None:
        for line in lines:
            if line.startswith("id name "):
                self.engine_name = line[len("id name "):]
            elif line.startswith("id author "):
                self.engine_author = line[len("id author "):]

    def _option_commands(self) -> List[str]:
        commands = [
            f"setoption name MultiPV value {self.config.multipv}",
            f"setoption name Threads value {self.config.threads}",
        ]
        if self.config.hash_mb is not None:
            commands.append(f"setoption name Hash value {self.config.hash_mb}")
        return commands

    def _request(
        self,
        commands: List[str],
        terminal_prefix: str,
        cancel_command: Optional[str] = None,
    ) -> List[str]:
        with self._state_lock:
            if self._state not in (EngineState.READY, EngineState.EVALUATING):
                raise InvalidState(f"Engine session is {self._state.value}, not ready")
            self._active_requests += 1
            self._state = EngineState.EVALUATING

        try:
            return self.sequencer.send_commands(
                commands, terminal_prefix, cancel_command=cancel_command
            )
        finally:
            with self._state_lock:
                self._active_requests -= 1
                if self._active_requests == 0 and self._state is EngineState.EVALUATING:
                    self._state = EngineState.READY

    def new_game(self) -> None:
        """Reset engine search state so nothing leaks from a previous game."""
        self._request(["ucinewgame", "position startpos", "isready"], "readyok")
        logger.debug("Engine reset for new game")

    def evaluate_position(self, fen: str, depth: Optional[int] = None) -> MoveEval:
        """
        Search one position.

        Args:
            fen: Position in FEN
            depth: Search depth (default: config.depth)

        Returns:
            MoveEval with the best move and ranked principal variations

        Raises:
            InvalidState: If the session is not ready
            TransportClosed: If the engine channel closes mid-search
            RequestTimeout: If the search exceeds config.request_timeout; the
                engine is sent 'stop' and its late bestmove is discarded
        """
        if depth is None:
            depth = self.config.depth

        lines = self._request(
            [f"position fen {fen}", f"go depth {depth}"], "bestmove", cancel_command="stop"
        )
        return parse_response(lines)

    def shutdown(self) -> None:
        """
        Quit the engine and release the channel.

        Any caller waiting on a response gets TransportClosed. Calling this
        again does nothing.
        """
        with self._state_lock:
            if self._state is EngineState.TERMINATED:
                return
            self._state = EngineState.TERMINATED

        if self.transport.is_open:
            try:
                self.transport.send("quit")
            except TransportClosed as e:
                logger.debug(f"Could not send quit: {e}")

        self.sequencer.close()
        self.transport.close()
        logger.info("Engine session shut down")

    def __enter__(self) -> "EngineSession":
        if self._state is EngineState.UNINITIALIZED:
            self.initialize()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"EngineSession({self.transport!r}, state={self._state.value})"
