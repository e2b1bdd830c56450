"""
Engine client exceptions.

Every error raised by the engine layer derives from EngineError so callers
can catch the whole family at once.
"""

from typing import Optional, Tuple


class EngineError(Exception):
    """Base class for engine client errors."""


class InitializationError(EngineError):
    """The UCI handshake did not complete."""


class TransportClosed(EngineError):
    """The channel to the engine closed before a request finished."""


class RequestTimeout(EngineError):
    """A command batch's terminal line did not arrive in time."""

    def __init__(self, terminal_prefix: str, timeout: float):
        super().__init__(
            f"No '{terminal_prefix}' line received within {timeout:.1f}s"
        )
        self.terminal_prefix = terminal_prefix
        self.timeout = timeout


class InvalidState(EngineError):
    """A request was made while the session could not serve it."""


class GameEvaluationError(EngineError):
    """
    Evaluation of a game failed part way through.

    Attributes:
        ply: Index of the position that failed
        partial: Move evaluations completed before the failure
    """

    def __init__(self, ply: int, partial: Tuple, cause: Optional[BaseException] = None):
        super().__init__(f"Game evaluation failed at ply {ply}: {cause}")
        self.ply = ply
        self.partial = partial
