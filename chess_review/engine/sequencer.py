"""
Serialized command batches over a Transport.

The engine answers on a single output stream, so responses can only be
attributed to a request if one batch is outstanding at a time. The
sequencer is the transport's only listener: inbound lines land in a queue
and the caller holding the batch lock drains it until the terminal line.

Example:
    sequencer = CommandSequencer(transport, timeout=10.0)
    sequencer.start()
    lines = sequencer.send_commands(["uci"], "uciok")
"""

import logging
import queue
import threading
import time
from typing import List, Optional, Sequence

from chess_review.engine.errors import RequestTimeout, TransportClosed
from chess_review.engine.transport import Transport

logger = logging.getLogger(__name__)

# Pushed into the inbox when no more lines can arrive
_CLOSED = object()


class CommandSequencer:
    """
    Send command batches and collect their responses one batch at a time.

    Attributes:
        transport: Channel to the engine
        timeout: Default seconds to wait for a batch's terminal line
    """

    def __init__(self, transport: Transport, timeout: float = 120.0):
        self.transport = transport
        self.timeout = timeout

        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._batch_lock = threading.Lock()
        self._closed = threading.Event()

        # Terminal prefix of a timed-out batch whose answer is still due
        self._owed_prefix: Optional[str] = None

    def start(self) -> None:
        """Start the transport with this sequencer as its listener."""
        self.transport.start(self._on_line, self._on_close)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """
        Stop accepting batches and release any caller waiting on a response.

        The waiting caller and every queued caller get TransportClosed.
        """
        if self._closed.is_set():
            return
        self._closed.set()
        self._inbox.put(_CLOSED)

    def _on_line(self, line: str) -> None:
        self._inbox.put(line)

    def _on_close(self) -> None:
        self.close()

    def send_commands(
        self,
        commands: Sequence[str],
        terminal_prefix: str,
        timeout: Optional[float] = None,
        cancel_command: Optional[str] = None,
    ) -> List[str]:
        """
        Send a batch of commands and wait for its terminal line.

        Blocks until no other batch is outstanding, then sends the commands
        in order and returns every line received up to and including the
        first one starting with terminal_prefix.

        Args:
            commands: Command lines to send, in order
            terminal_prefix: Prefix of the line that ends the response
            timeout: Seconds to wait for the terminal line (None = default)
            cancel_command: Sent when the terminal line does not arrive in
                time, to make the engine answer now instead of later

        Returns:
            Response lines in arrival order

        Raises:
            TransportClosed: If the channel closes before the terminal line
            RequestTimeout: If the terminal line does not arrive in time
        """
        if timeout is None:
            timeout = self.timeout

        with self._batch_lock:
            if self._closed.is_set():
                raise TransportClosed("Engine channel is closed")

            if self._owed_prefix is not None:
                self._settle_owed_response(timeout)

            self._discard_stray_lines()

            for command in commands:
                logger.debug(f">>> {command}")
                self.transport.send(command)

            try:
                return self._collect(terminal_prefix, timeout)
            except RequestTimeout:
                self._owed_prefix = terminal_prefix
                if cancel_command is not None:
                    self._send_cancel(cancel_command)
                raise

    def _send_cancel(self, command: str) -> None:
        logger.debug(f">>> {command}")
        try:
            self.transport.send(command)
        except TransportClosed:
            logger.debug(f"Could not send '{command}': engine channel closed")

    def _settle_owed_response(self, timeout: float) -> None:
        """Consume the late answer of a batch that previously timed out."""
        prefix = self._owed_prefix
        late_lines = self._collect(prefix, timeout)
        logger.warning(
            f"Discarded {len(late_lines)} late line(s) ending with '{late_lines[-1]}'"
        )
        self._owed_prefix = None

    def _discard_stray_lines(self) -> None:
        while True:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                return
            if item is _CLOSED:
                raise TransportClosed("Engine channel closed")
            logger.debug(f"Discarding unsolicited line: {item}")

    def _collect(self, terminal_prefix: str, timeout: float) -> List[str]:
        lines: List[str] = []
        deadline = time.monotonic() + timeout

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise RequestTimeout(terminal_prefix, timeout)

            try:
                item = self._inbox.get(timeout=remaining)
            except queue.Empty:
                raise RequestTimeout(terminal_prefix, timeout) from None

            if item is _CLOSED:
                raise TransportClosed(
                    f"Engine channel closed while waiting for '{terminal_prefix}'"
                )

            logger.debug(f"<<< {item}")
            lines.append(item)

            if item.startswith(terminal_prefix):
                return lines
