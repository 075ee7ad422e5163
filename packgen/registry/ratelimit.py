from __future__ import annotations

import logging
import time
from typing import Callable, Mapping

logger = logging.getLogger("packgen")

REMAINING_HEADER = "X-Ratelimit-Remaining"
RESET_HEADER = "X-Ratelimit-Reset"


class RateLimitGate:
    """Cooldown shared by every lookup issued through one resolver.

    ``next_allowed`` is only written by :meth:`observe`, which the resolver
    calls once per registry response.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self.next_allowed = 0.0

    def wait(self) -> float:
        delay = self.next_allowed - self._clock()
        if delay <= 0:
            return 0.0
        logger.debug("Rate limited by registry, waiting %.1fs", delay)
        self._sleep(delay)
        return delay

    def observe(self, headers: Mapping[str, str]) -> None:
        if str(headers.get(REMAINING_HEADER, "")).strip() != "0":
            return
        try:
            reset = float(headers.get(RESET_HEADER, 0))
        except (TypeError, ValueError):
            reset = 0.0
        self.next_allowed = self._clock() + max(reset, 0.0)
        logger.debug("Registry quota exhausted, next request in %.0fs", reset)
