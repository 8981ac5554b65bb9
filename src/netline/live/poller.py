import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

REQUEST_MESSAGE = {"request": "get", "description": "get"}


class PresencePoller:
    """
    Publishes a snapshot request immediately and then every ``interval``
    seconds until ``stop()`` is called.

    ``publish`` is any callable taking the message dict. A failed publish
    is logged and ``on_error`` (if given) is called; the loop keeps going.
    """

    def __init__(
        self,
        publish: Callable[[dict], None],
        interval: float = 8.0,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.publish = publish
        self.interval = interval
        self.on_error = on_error
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.requests_sent = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def request_once(self) -> bool:
        try:
            self.publish(dict(REQUEST_MESSAGE))
        except Exception as e:
            logger.warning("Presence request failed: %s", e)
            if self.on_error is not None:
                self.on_error(e)
            return False
        self.requests_sent += 1
        return True

    def run(self) -> None:
        """Blocking loop; returns once ``stop()`` is called."""
        logger.info("Presence poller started (every %ss)", self.interval)
        self.request_once()
        while not self._stop.wait(self.interval):
            self.request_once()
        logger.info("Presence poller stopped after %d requests", self.requests_sent)

    def start(self) -> "PresencePoller":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="presence-poller", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
