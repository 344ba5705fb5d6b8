"""Random numbers from a truncated Cauchy distribution."""

from __future__ import annotations

import math
import random

_CUTOFF = 10.0
_rng = random.Random()


def cauchy(wtrange: float, rng: random.Random | None = None) -> float:
    """Draw from a Cauchy distribution centred on zero with scale ``wtrange``.

    Values whose magnitude exceeds 10 are rejected and redrawn.
    """
    rng = rng or _rng
    while True:
        u = 0.5
        while u == 0.5:
            u = rng.random()
        value = wtrange * math.tan(u * math.pi)
        if abs(value) <= _CUTOFF:
            return value