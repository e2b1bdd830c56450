"""
Engine and review configuration.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class EngineConfig:
    """Configuration for an engine session and game reviews.

    Groups the engine binary, search limits, protocol timeouts and
    report settings in one place.
    """

    # Engine binary
    engine_path: Optional[str] = None
    """Path to a UCI engine binary (None = auto-detect Stockfish)"""

    # Search
    depth: int = 16
    """Search depth for each position"""

    multipv: int = 3
    """Number of principal variations requested from the engine"""

    threads: int = 1
    """Search threads used by the engine"""

    hash_mb: Optional[int] = None
    """Engine hash table size in MB (None = engine default)"""

    # Protocol
    init_timeout: float = 10.0
    """Seconds to wait for 'uciok' and 'readyok' during the handshake"""

    request_timeout: float = 120.0
    """Seconds to wait for the terminal line of a single command batch"""

    # Accuracy
    mate_score: int = 10000
    """Centipawn value standing in for a forced mate"""

    # Reporting
    show_progress: bool = False
    """Show a progress bar while evaluating a game"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.depth <= 0:
            raise ValueError(f"depth must be positive, got {self.depth}")

        if self.multipv <= 0:
            raise ValueError(f"multipv must be positive, got {self.multipv}")

        if self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")

        if self.hash_mb is not None and self.hash_mb <= 0:
            raise ValueError(f"hash_mb must be positive, got {self.hash_mb}")

        if self.init_timeout <= 0:
            raise ValueError(f"init_timeout must be positive, got {self.init_timeout}")

        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )

        if self.mate_score <= 0:
            raise ValueError(f"mate_score must be positive, got {self.mate_score}")

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(\n"
            f"  Engine: {self.engine_path or 'auto-detect'}\n"
            f"  Search: depth={self.depth}, multipv={self.multipv}, threads={self.threads}\n"
            f"  Timeouts: init={self.init_timeout}s, request={self.request_timeout}s\n"
            f")"
        )
