"""Enforced subpopulations neuroevolution for double pole balancing."""

__version__ = "0.1.0"