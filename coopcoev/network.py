"""Neural networks assembled from one neuron per subpopulation."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Sequence

from coopcoev.activation import logistic
from coopcoev.neuron import Neuron
from coopcoev.population import Population

_ids = itertools.count(1)


class Network(ABC):
    """A single-hidden-layer network whose hidden units come from subpopulations."""

    name = "Network"

    def __init__(
        self, num_inputs: int, num_hidden: int, num_outputs: int, bias: bool
    ) -> None:
        self.id = next(_ids)
        self.num_inputs = num_inputs
        self.num_outputs = num_outputs
        self.bias = bias
        self.activation: list[float] = [0.0] * num_hidden
        self.hidden_units: list[Neuron] = []
        self._num_hidden = num_hidden
        self.outputs: list[float] = [0.0] * num_outputs
        self.trials = 0
        self.fitness = 0
        self.parent1 = -1
        self.parent2 = -1
        self.gene_size = self._connections(num_hidden) + (1 if bias else 0)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id}, inputs={self.num_inputs}, "
            f"hidden={self._num_hidden}, outputs={self.num_outputs}, "
            f"bias={self.bias}, fitness={self.fitness})"
        )

    @abstractmethod
    def _connections(self, num_hidden: int) -> int:
        """Number of weights per hidden neuron, not counting the bias."""

    @property
    def total_inputs(self) -> int:
        """Number of inputs, including the bias input if there is one."""
        return self.num_inputs + 1 if self.bias else self.num_inputs

    @property
    def total_outputs(self) -> int:
        return self.num_outputs

    def create(self, populations: Sequence[Population]) -> None:
        """Pick one hidden neuron at random from each subpopulation."""
        if len(populations) != self._num_hidden:
            raise ValueError(
                f"expected {self._num_hidden} populations, got {len(populations)}"
            )
        self.hidden_units = [p.select_neuron() for p in populations]

    @abstractmethod
    def activate(self, inputs: Sequence[float]) -> list[float]:
        """Propagate ``inputs`` through the network and return the outputs."""

    def set_neuron_fitness(self) -> None:
        """Credit the network's fitness and one trial to each hidden neuron."""
        for neuron in self.hidden_units:
            neuron.add_fitness(self.fitness)
            neuron.trials += 1

    def tag(self) -> None:
        """Mark every hidden neuron as belonging to the best network."""
        for neuron in self.hidden_units:
            neuron.tag = True

    def reset_activation(self) -> None:
        """Zero the hidden activations and the outputs."""
        self.activation = [0.0] * len(self.hidden_units)
        self.outputs = [0.0] * self.num_outputs

    def reset_fitness(self) -> None:
        """Zero the fitness and trial count."""
        self.fitness = 0
        self.trials = 0


class FeedForward(Network):
    """A feed-forward network; each neuron holds input and output weights.

    Hidden activations and outputs accumulate across calls until reset.
    """

    name = "Feed Forward"

    def _connections(self, num_hidden: int) -> int:
        return self.num_inputs + self.num_outputs

    def activate(self, inputs: Sequence[float]) -> list[float]:
        n_in = len(inputs)
        for key, neuron in enumerate(self.hidden_units):
            if not neuron.lesioned:
                total = self.activation[key] + sum(
                    w * x for w, x in zip(neuron.weight[:n_in], inputs, strict=True)
                )
                self.activation[key] = logistic(1.0, total)
        for i in range(self.num_outputs):
            total = self.outputs[i] + sum(
                a * neuron.weight[n_in + i]
                for a, neuron in zip(self.activation, self.hidden_units)
            )
            self.outputs[i] = logistic(1.0, total)
        return list(self.outputs)


class Recurrent(Network):
    """A fully recurrent network whose first hidden units are the outputs."""

    name = "Recurrent"
    delay = 2

    def _connections(self, num_hidden: int) -> int:
        return self.num_inputs + num_hidden

    def activate(self, inputs: Sequence[float]) -> list[float]:
        width = len(inputs) + len(self.hidden_units)
        for _ in range(self.delay):
            signal = list(inputs) + self.activation
            for key, neuron in enumerate(self.hidden_units):
                self.activation[key] = 0.0
                if not neuron.lesioned:
                    total = sum(
                        w * x
                        for w, x in zip(neuron.weight[:width], signal[:width], strict=True)
                    )
                    self.activation[key] = logistic(1.0, total)
            self.outputs = self.activation[: self.num_outputs]
        return list(self.outputs)