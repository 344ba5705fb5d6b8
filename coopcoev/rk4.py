"""Fourth-order Runge-Kutta integration of a first-order ODE."""

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
        k1 = dydx(self.x, self.y)
        k2 = dydx(self.x + 0.5 * dx, self.y + 0.5 * k1 * dx)
        k3 = dydx(self.x + 0.5 * dx, self.y + 0.5 * k2 * dx)
        k4 = dydx(self.x + dx, self.y + k3 * dx)
        self.x += dx
        self.y = self.y + (1.0 / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4) * dx

    def solve(self, dx: float, dydx: Equation, x_final: float) -> float:
        """Advance in steps of ``dx`` until ``x`` reaches ``x_final``; return ``y``."""
        while self.x < x_final:
            self._step(dx, dydx)
        return self.y