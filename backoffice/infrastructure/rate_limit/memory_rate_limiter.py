import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding-window limiter; state lives in this process only.

    Keys whose window has fully elapsed are swept every ``sweep_interval``
    seconds so one-off keys (client IPs, submitted emails) do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.time, sweep_interval: float = 60.0) -> None:
        self._store: Dict[str, Deque[float]] = defaultdict(deque)
        self._windows: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._last_sweep = clock()

    def allow(self, key: str, max_requests: int, window_seconds: int) -> bool:
        now = self._clock()
        window_start = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval:
                self._sweep(now)
            times = self._store[key]
            self._windows[key] = window_seconds
            # prune
            while times and times[0] <= window_start:
                times.popleft()
            if len(times) >= max_requests:
                return False
            times.append(now)
            return True

    def _sweep(self, now: float) -> None:
        for key in list(self._store):
            times = self._store[key]
            if not times or times[-1] <= now - self._windows.get(key, 0):
                del self._store[key]
                self._windows.pop(key, None)
        self._last_sweep = now
