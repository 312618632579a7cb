"""Fan-out of written log bytes to live tail subscribers."""

import logging
import queue
import threading

logger = logging.getLogger(__name__)


class Subscription:
    """One live tail session: a bounded queue plus a cancellation event."""

    def __init__(self, max_queue: int, cancel_event: threading.Event | None = None):
        self._queue: queue.Queue = queue.Queue(maxsize=max_queue)
        self._cancelled = cancel_event or threading.Event()
        self.dropped = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self):
        self._cancelled.set()

    def offer(self, data: bytes) -> bool:
        """Queue *data* without blocking. Returns False if it had to be dropped."""
        try:
            self._queue.put_nowait(data)
            return True
        except queue.Full:
            self.dropped += 1
            return False

    def get(self, timeout: float | None = None) -> bytes | None:
        """Next chunk in write order, or None if nothing arrived within *timeout*."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def stream(self, poll_interval: float = 1.0):
        """Yield chunks until cancelled; yields None on each idle poll."""
        while not self.cancelled:
            yield self.get(timeout=poll_interval)


class TailBroadcaster:
    """Delivers every published chunk to all registered subscribers.

    Publishing never blocks: a subscriber whose queue is full misses the
    chunk, and cancelled subscribers are dropped on the next publish.
    """

    def __init__(self, max_queue: int = 1024):
        self._max_queue = max_queue
        self._lock = threading.Lock()
        self._subscribers: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, cancel_event: threading.Event | None = None) -> Subscription:
        sub = Subscription(self._max_queue, cancel_event)
        with self._lock:
            self._subscribers.append(sub)
        logger.debug("Tail subscriber added (%d active)", self.subscriber_count)
        return sub

    def unsubscribe(self, sub: Subscription):
        sub.cancel()
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    def publish(self, data: bytes):
        with self._lock:
            self._subscribers = [s for s in self._subscribers if not s.cancelled]
            for sub in self._subscribers:
                sub.offer(data)
