"""Delay policy for sequential group batch operations."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Optional, Union

from wajs.core.errors import ValidationError

SleepOption = Union[None, int, float, Sequence[Union[int, float]]]

MIN_JITTER_SPREAD_MS = 100


def effective_sleep(sleep: SleepOption) -> Optional[tuple[float, float]]:
    """Normalizes a sleep option into a closed ``(low, high)`` interval in ms.

    A number is a fixed delay. An interval narrower than 100 ms becomes
    ``(high, high + 100)``. ``None`` disables the delay.
    """
    if sleep is None:
        return None
    if isinstance(sleep, bool):
        raise ValidationError("sleep must be a number or a [low, high] pair")
    if isinstance(sleep, (int, float)):
        return (float(sleep), float(sleep))

    values = list(sleep)
    if len(values) != 2:
        raise ValidationError("sleep interval must have exactly two values")
    low, high = float(values[0]), float(values[1])
    if high - low < MIN_JITTER_SPREAD_MS:
        return (high, high + MIN_JITTER_SPREAD_MS)
    return (low, high)


def batch_sleep_ms(index: int, total: int, sleep: SleepOption, rng: random.Random | None = None) -> float:
    """Milliseconds to wait after processing item ``index`` of ``total``.

    Returns 0 after the last item.
    """
    if index >= total - 1:
        return 0.0
    interval = effective_sleep(sleep)
    if interval is None:
        return 0.0
    low, high = interval
    if low == high:
        return low
    return (rng or random).uniform(low, high)
