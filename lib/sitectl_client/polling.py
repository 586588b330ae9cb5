from __future__ import annotations

import time
from typing import Callable, TypeVar

T = TypeVar("T")


def poll_until(
        check: Callable[[int], T | None],
        *,
        attempts: int,
        interval_s: float,
        sleep: Callable[[float], None] = time.sleep,
        on_attempt: Callable[[int, T | None], None] | None = None,
) -> T | None:
    """Call ``check(attempt)`` until it returns a truthy value.

    Makes at most ``attempts`` calls, sleeping ``interval_s`` between them (not
    after the last one). Returns the first truthy result, or ``None`` when the
    budget is exhausted.
    """
    total = max(1, int(attempts))
    for attempt in range(1, total + 1):
        result = check(attempt)
        if on_attempt:
            on_attempt(attempt, result)
        if result:
            return result
        if attempt < total:
            sleep(max(0.0, float(interval_s)))
    return None
