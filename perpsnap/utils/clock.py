from __future__ import annotations

import time
from typing import Callable

# Returns "now" as epoch milliseconds. Injected wherever the wall clock matters.
Clock = Callable[[], int]


def system_clock_ms() -> int:
    return int(time.time() * 1000)
