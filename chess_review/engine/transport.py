"""
Duplex text channel to a UCI engine.

A Transport pushes command lines to the engine and hands every line the
engine prints to a single listener callback. Lines are delivered from a
background reader thread in arrival order.
"""

import logging
import shutil
import subprocess
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from chess_review.engine.errors import TransportClosed

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]
CloseCallback = Callable[[], None]


def find_engine() -> str:
    """
    Auto-detect a Stockfish binary.

    Returns:
        Path to Stockfish binary

    Raises:
        FileNotFoundError: If Stockfish not found
    """
    candidates = [
        "stockfish",
        "/usr/local/bin/stockfish",
        "/usr/bin/stockfish",
        "/usr/games/stockfish",
        "/opt/homebrew/bin/stockfish",
    ]

    for candidate in candidates:
        path = shutil.which(candidate)
        if path:
            return path

    raise FileNotFoundError(
        "Stockfish not found. Install with: brew install stockfish (macOS) "
        "or apt install stockfish (Linux)"
    )


class Transport(ABC):
    """
    Abstract duplex line channel.

    Implementations must call on_line once per inbound line, in order,
    and on_close exactly once when no further lines can arrive.
    """

    @abstractmethod
    def start(self, on_line: LineCallback, on_close: CloseCallback) -> None:
        """Open the channel and begin delivering lines. Must not block."""

    @abstractmethod
    def send(self, line: str) -> None:
        """
        Push one command line to the engine.

        Raises:
            TransportClosed: If the channel is not open
        """

    @abstractmethod
    def close(self) -> None:
        """Release the channel. Safe to call more than once."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the channel can still carry commands."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SubprocessTransport(Transport):
    """Transport backed by an engine subprocess talking over stdin/stdout."""

    def __init__(self, engine_path: Optional[str] = None, quit_timeout: float = 1.0):
        """
        Args:
            engine_path: Path to engine binary (None = auto-detect)
            quit_timeout: Seconds to wait for the process to exit on close

        Raises:
            FileNotFoundError: If the engine binary does not exist
        """
        if engine_path is None:
            engine_path = find_engine()

        if not Path(engine_path).exists() and shutil.which(engine_path) is None:
            raise FileNotFoundError(f"Engine binary not found at: {engine_path}")

        self.engine_path = engine_path
        self.quit_timeout = quit_timeout

        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._write_lock = threading.Lock()
        self._closed = False

    @property
    def is_open(self) -> bool:
        return (
            not self._closed
            and self._process is not None
            and self._process.poll() is None
        )

    def start(self, on_line: LineCallback, on_close: CloseCallback) -> None:
        if self._process is not None:
            raise RuntimeError("Transport already started")

        self._process = subprocess.Popen(
            [self.engine_path],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            bufsize=1,
        )
        logger.info(f"Started engine process {self._process.pid}: {self.engine_path}")

        self._reader = threading.Thread(
            target=self._read_loop,
            args=(self._process, on_line, on_close),
            name=f"engine-reader-{self._process.pid}",
            daemon=True,
        )
        self._reader.start()

    def _read_loop(
        self,
        process: subprocess.Popen,
        on_line: LineCallback,
        on_close: CloseCallback,
    ) -> None:
        try:
            for line in process.stdout:
                line = line.strip()
                if line:
                    on_line(line)
        except (OSError, ValueError) as e:
            # stdout closed underneath the reader during shutdown
            logger.debug(f"Engine reader stopped: {e}")
        finally:
            logger.debug(f"Engine process {process.pid} output closed")
            on_close()

    def send(self, line: str) -> None:
        if not self.is_open:
            raise TransportClosed(f"Cannot send '{line}': engine process is not running")

        with self._write_lock:
            try:
                self._process.stdin.write(line + "\n")
                self._process.stdin.flush()
            except (BrokenPipeError, OSError, ValueError) as e:
                raise TransportClosed(f"Cannot send '{line}': {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        process = self._process
        if process is None:
            return

        try:
            process.stdin.close()
        except (BrokenPipeError, OSError) as e:
            logger.debug(f"Engine stdin already closed: {e}")

        try:
            process.wait(timeout=self.quit_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Engine process {process.pid} did not exit, killing it")
            process.kill()
            process.wait()

        logger.info(f"Engine process {process.pid} exited with code {process.returncode}")

    def __repr__(self) -> str:
        return f"SubprocessTransport({self.engine_path!r})"
