"""The double pole balancing (inverted pendulum) task."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from coopcoev.rk4 import Point

RAD_TO_DEG = 180 / math.pi
DEG_TO_RAD = math.pi / 180
GRAVITY = 9.81

FORCE_MAG = 10.0  # magnitude of the force pushing the cart, either way
TAU = 0.02  # seconds between state updates
FAILURE_ANGLE = 36.0  # degrees

_STEP_SIZE = 0.01
_MIN_FORCE = FORCE_MAG / 256.0


@dataclass
class State:
    """Cart position and velocity, pole angles and angular velocities."""

    x: float = 0.0
    x_dot: float = 0.0
    theta1: float = 0.0
    theta2: float = 0.0
    theta_dot1: float = 0.0
    theta_dot2: float = 0.0


@runtime_checkable
class Environment(Protocol):
    """A task in which a controller is evaluated step by step."""

    state: State

    def within_track_bounds(self) -> bool: ...

    def within_angle_bounds(self) -> bool: ...

    def perform_action(self, action: float) -> None: ...

    def reset(self) -> None: ...


def _integrate(value: float, derivative: float) -> float:
    return Point(0.0, value).solve(_STEP_SIZE, lambda x, y: derivative, TAU)


class Cartpole:
    """A cart on a track carrying two hinged poles of different lengths."""

    def __init__(self, length2: float) -> None:
        self.name = "Double Pole Balancing Task"
        self.track_size = 2.4
        self.up = 0.000002  # pole-hinge friction coefficient
        self.uc = 0.0005  # cart-track friction coefficient
        self.mass_cart = 1.0
        self.mass_pole1 = 0.1
        self.mass_pole2 = 0.01
        self.length1 = 0.5  # half the long pole's length
        self.length2 = length2  # half the short pole's length
        self.state = State()

    def __repr__(self) -> str:
        return f"Cartpole(length2={self.length2}, state={self.state})"

    def reset(self) -> None:
        """Tilt the long pole to its starting angle."""
        self.state.theta1 = 0.07

    def perform_action(self, action: float) -> None:
        """Apply a force derived from ``action`` in [0, 1] for one time step."""
        s = self.state
        force = (action - 0.5) * (FORCE_MAG * 2)
        if 0 <= force < _MIN_FORCE:
            force = _MIN_FORCE
        if -_MIN_FORCE < force < 0:
            force = -_MIN_FORCE

        sin1, cos1 = math.sin(s.theta1), math.cos(s.theta1)
        sin2, cos2 = math.sin(s.theta2), math.cos(s.theta2)
        g_sin1 = GRAVITY * sin1
        g_sin2 = GRAVITY * sin2

        temp1 = (self.up * s.theta_dot1) / (self.length1 * self.mass_pole1)
        temp2 = (self.up * s.theta_dot2) / (self.length2 * self.mass_pole2)
        fi1 = self.length1 * self.mass_pole1 * s.theta_dot1**2 * sin1 + (
            0.75 * self.mass_pole1 * cos1 * (temp1 + g_sin1)
        )
        fi2 = self.length2 * self.mass_pole2 * s.theta_dot2**2 * sin2 + (
            0.75 * self.mass_pole2 * cos2 * (temp2 + g_sin2)
        )
        mi1 = self.mass_pole1 * (1 - 0.75 * cos1**2)
        mi2 = self.mass_pole2 * (1 - 0.75 * cos2**2)

        x_dot_dot = (force + fi1 + fi2) / (mi1 + mi2 + self.mass_cart)
        theta_dot_dot1 = -0.75 * (x_dot_dot * cos1 + g_sin1 + temp1) / self.length1
        theta_dot_dot2 = -0.75 * (x_dot_dot * cos2 + g_sin2 + temp2) / self.length2

        x_dot, theta_dot1, theta_dot2 = s.x_dot, s.theta_dot1, s.theta_dot2
        s.x = _integrate(s.x, x_dot)
        s.theta1 = _integrate(s.theta1, theta_dot1)
        s.theta2 = _integrate(s.theta2, theta_dot2)
        s.x_dot = _integrate(x_dot, x_dot_dot)
        s.theta_dot1 = _integrate(theta_dot1, theta_dot_dot1)
        s.theta_dot2 = _integrate(theta_dot2, theta_dot_dot2)

    def within_track_bounds(self) -> bool:
        """True while the cart is on the track."""
        return -self.track_size < self.state.x < self.track_size

    def within_angle_bounds(self) -> bool:
        """True while both poles are within the failure angle."""
        failure = FAILURE_ANGLE * DEG_TO_RAD
        return (
            -failure < self.state.theta1 < failure
            and -failure < self.state.theta2 < failure
        )