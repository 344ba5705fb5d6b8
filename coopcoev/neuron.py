"""A hidden-layer neuron evolved in its own subpopulation."""

from __future__ import annotations

import itertools
import random

from coopcoev.cauchy import cauchy

_ids = itertools.count(1)
_rng = random.Random()

PERTURB_SCALE = 0.3


class Neuron:
    """A neuron: a vector of connection weights plus evaluation bookkeeping."""

    def __init__(self, size: int, name: str = "basic neuron") -> None:
        self.id = next(_ids)
        self.weight: list[float] = [0.0] * size
        self.lesioned = False
        self.trials = 0
        self.fitness = 0
        self.tag = False
        self.parent1 = -1
        self.parent2 = -1
        self.name = name

    def __repr__(self) -> str:
        return (
            f"Neuron(id={self.id}, fitness={self.fitness}, trials={self.trials}, "
            f"tag={self.tag}, weight={self.weight})"
        )

    def create(self, rng: random.Random | None = None) -> None:
        """Fill the weights with uniform random values in [-6, 6)."""
        rng = rng or _rng
        self.weight = [rng.random() * 12.0 - 6.0 for _ in self.weight]

    def add_fitness(self, fitness: int) -> None:
        """Add ``fitness`` to the cumulative fitness."""
        self.fitness += fitness

    def perturb(self, best: Neuron, rng: random.Random | None = None) -> None:
        """Replace the weights by Cauchy noise around ``best`` unless tagged.

        Fitness and trials are reset in either case.
        """
        if not self.tag:
            if len(best.weight) < len(self.weight):
                raise ValueError("best neuron has fewer weights than this neuron")
            self.weight = [
                w + cauchy(PERTURB_SCALE, rng) for w in best.weight[: len(self.weight)]
            ]
        self.reset_fitness()

    def reset_fitness(self) -> None:
        """Zero the fitness and trial count."""
        self.fitness = 0
        self.trials = 0