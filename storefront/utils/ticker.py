# storefront/utils/ticker.py
import threading
from typing import Callable

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Ticker:
    """Calls `callback` every `interval` seconds on a daemon thread until stop()."""

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "ticker"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"Ticker {self.name} started, interval {self.interval}s")

    def stop(self, timeout: float | None = 5.0):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
        logger.info(f"Ticker {self.name} stopped")

    def _loop(self):
        while not self._stop.wait(self.interval):
            try:
                self.callback()
            except Exception:
                # blad zadania nie zabija watku harmonogramu
                logger.exception(f"Ticker {self.name} callback failed")
