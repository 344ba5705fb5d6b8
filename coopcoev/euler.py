"""First-order (Euler) integration of a first-order ODE."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Equation = Callable[[float, float], float]


@dataclass
class Point:
    """A point (x, y) on the solution curve of dy/dx = f(x, y)."""

    x: float
    y: float

    def _step(self, dx: float, dydx: Equation) -> None:
        dy = dx * dydx(self.x, self.y)
        self.x, self.y = self.x + dx, self.y + dy

    def solve(self, dx: float, dydx: Equation, x_final: float) -> float:
        """Advance in steps of ``dx`` until ``x`` reaches ``x_final``; return ``y``."""
        while self.x < x_final:
            self._step(dx, dydx)
        return self.y