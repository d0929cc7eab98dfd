"""
Identifier Generation

Ids are opaque strings: a base-36 millisecond timestamp, a base-36 random
component and a process-local sequence number. The timestamp keeps ids
roughly time-ordered when read by a human; the sequence makes them
distinct within the process even when the clock and the random part
repeat.
"""

import itertools
import time
from typing import Callable, Optional
from uuid import uuid4


_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base-36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


class IdentifierGenerator:
    """Produces unique, never-reused string ids."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._sequence = itertools.count()

    def next(self) -> str:
        millis = int(self._clock() * 1000)
        # 48 random bits keep ids short while making collisions negligible
        random_part = uuid4().int >> 80
        return (
            f"{to_base36(millis)}"
            f"{to_base36(random_part).rjust(10, '0')}"
            f"{to_base36(next(self._sequence))}"
        )

    __call__ = next
