import sys
import logging
import threading
from typing import TYPE_CHECKING, Optional, TextIO

from msp_launcher import settings

if TYPE_CHECKING:
    from .backend import ProcessBackend

log = logging.getLogger(__name__)

STATUS_TEMPLATE = "Press any key to kill all the clients... Or press Ctrl+C to exit. Current memory usage: {usage:.2f}%"


class StatusTicker:
    """
    Rewrites a single console line with the current memory usage until stopped.
    Runs in a daemon thread so it never keeps the launcher alive on its own.
    """

    def __init__(
        self,
        backend: "ProcessBackend",
        interval: float = settings.STATUS_REFRESH_INTERVAL,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.backend = backend
        self.interval = interval
        self._stream = stream
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._line_written = False

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def render(self) -> str:
        return STATUS_TEMPLATE.format(usage=self.backend.current_memory_usage_percent())

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                line = self.render()
            except RuntimeError as e:
                log.error(f"Status updates stopped: {e}")
                return
            self.stream.write("\r" + line)
            self.stream.flush()
            self._line_written = True
            self._stop_event.wait(self.interval)

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="StatusTickerThread")
        self._thread.start()

    def stop(self) -> None:
        """Signals the ticker to stop and waits briefly for it. Ends the status line."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=settings.STATUS_TICKER_JOIN_TIMEOUT)
            if self._thread.is_alive():
                log.warning("Status ticker did not stop in time.")
        if self._line_written:
            self.stream.write("\n")
            self.stream.flush()
            self._line_written = False
