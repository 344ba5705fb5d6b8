"""A subpopulation of neurons competing for one hidden-unit position."""

from __future__ import annotations

import itertools
import random

from coopcoev.cauchy import cauchy
from coopcoev.neuron import Neuron

_ids = itertools.count(1)
_rng = random.Random()

MUTATION_SCALE = 0.3


def _average_fitness(neuron: Neuron) -> int:
    """Fitness per trial, truncated toward zero; unevaluated neurons count one trial."""
    trials = neuron.trials or 1
    quotient = abs(neuron.fitness) // abs(trials)
    return quotient if (neuron.fitness >= 0) == (trials > 0) else -quotient


def one_point_crossover(
    parent1: Neuron,
    parent2: Neuron,
    child1: Neuron,
    child2: Neuron,
    rng: random.Random | None = None,
) -> None:
    """Overwrite two children with a one-point crossover of two parents."""
    rng = rng or _rng
    if len(parent1.weight) != len(parent2.weight):
        raise ValueError("parents must have the same number of weights")
    crosspoint = rng.randrange(len(parent1.weight))
    child1.weight = parent1.weight[:crosspoint] + parent2.weight[crosspoint:]
    child2.weight = parent2.weight[:crosspoint] + parent1.weight[crosspoint:]
    for child in (child1, child2):
        child.parent1 = parent1.id
        child.parent2 = parent2.id
        child.reset_fitness()


class Population:
    """A fixed-size pool of neurons with selection, mating and mutation."""

    def __init__(
        self, size: int, gene_size: int, rng: random.Random | None = None
    ) -> None:
        self.id = next(_ids)
        self.num_individuals = size
        self.evolvable = True
        self.numbreed = size // 4
        self.individuals: list[Neuron] = []
        self.gene_size = gene_size
        self._rng = rng or _rng

    def __repr__(self) -> str:
        return (
            f"Population(id={self.id}, size={self.num_individuals}, "
            f"gene_size={self.gene_size})"
        )

    def create(self) -> None:
        """Fill the population with randomly initialised neurons."""
        if not self.evolvable:
            return
        self.individuals = []
        for _ in range(self.num_individuals):
            neuron = Neuron(self.gene_size)
            neuron.create(self._rng)
            self.individuals.append(neuron)

    def select_neuron(self) -> Neuron:
        """Return a neuron chosen uniformly at random."""
        return self.individuals[self._rng.randrange(self.num_individuals)]

    def sort_neurons(self) -> None:
        """Sort by average fitness, best first."""
        self.individuals.sort(key=_average_fitness, reverse=True)

    def mate(self) -> None:
        """Breed the top quartile, replacing the bottom half with offspring."""
        for i in range(self.numbreed):
            mate = self._rng.randrange(self.numbreed if i == 0 else i)
            child1 = self.individuals[self.num_individuals - (1 + i * 2)]
            child2 = self.individuals[self.num_individuals - (2 + i * 2)]
            one_point_crossover(
                self.individuals[i], self.individuals[mate], child1, child2, self._rng
            )

    def mutate(self, rate: float) -> None:
        """With probability ``rate``, add Cauchy noise to one weight of each lower neuron."""
        for neuron in self.individuals[self.numbreed * 2 :]:
            if self._rng.random() < rate:
                index = self._rng.randrange(self.gene_size)
                neuron.weight[index] += cauchy(MUTATION_SCALE, self._rng)

    def grow_individuals(self) -> None:
        """Append a weight of 1.0 to every neuron."""
        for neuron in self.individuals:
            neuron.weight.append(1.0)