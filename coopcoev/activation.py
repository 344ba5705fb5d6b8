"""Neuron activation functions."""

from __future__ import annotations

import math


def logistic(b: float, t: float) -> float:
    """The logistic sigmoid 1 / (1 + e^(-b*t))."""
    try:
        return 1.0 / (1.0 + math.exp(-(b * t)))
    except OverflowError:
        return 0.0