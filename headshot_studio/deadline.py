import time
from typing import Optional


class Deadline:
    """Absolute point in time shared by every remote tier of one request."""

    def __init__(self, seconds: float, clock=time.monotonic):
        self._clock = clock
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def timeout(self, ceiling: Optional[float] = None) -> float:
        """Seconds a call may block: what is left, capped by ``ceiling``."""
        left = self.remaining()
        return left if ceiling is None else min(ceiling, left)
