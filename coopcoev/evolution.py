"""Enforced subpopulations neuroevolution on the double pole balancing task."""

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import random
import sys
import time
from collections import Counter, defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Sequence

from coopcoev.cartpole import Cartpole, Environment, State
from coopcoev.network import FeedForward, Network, Recurrent
from coopcoev.population import Population

NON_MARKOV_INPUTS = 3
BIAS_INPUT = 0.5
DEFAULT_STATES_PATH = Path("simulation/processingjs/json/states.json")


@dataclass
class Config:
    """Settings for one evolutionary run."""

    simulation: bool = False
    markov: bool = False
    cpus: int = 1
    hidden: int = 5
    size: int = 100
    inputs: int = 6
    outputs: int = 1
    burst: int = 15
    max_generations: int = 100000
    goal_fitness: int = 100000
    short_pole_length: float = 0.05
    mutation_rate: float = 0.4
    states_path: Path = DEFAULT_STATES_PATH


def initialize(
    hidden_units: int,
    size: int,
    gene_size: int,
    rng: random.Random | None = None,
) -> list[Population]:
    """Create one randomly initialised subpopulation per hidden unit."""
    populations = []
    for _ in range(hidden_units):
        population = Population(size, gene_size, rng)
        population.create()
        populations.append(population)
    return populations


def network_inputs(state: State, markov: bool, bias: bool) -> list[float]:
    """Scale the cart-pole state into network inputs.

    The non-Markov task hides the velocities from the network.
    """
    if markov:
        inputs = [
            state.x / 4.8,
            state.x_dot / 2,
            state.theta1 / 0.52,
            state.theta2 / 0.52,
            state.theta_dot1 / 2,
            state.theta_dot2 / 2,
        ]
    else:
        inputs = [state.x / 4.8, state.theta1 / 0.52, state.theta2 / 0.52]
    if bias:
        inputs.append(BIAS_INPUT)
    return inputs


def _run_episode(
    environment: Environment,
    network: Network,
    goal_fitness: int,
    markov: bool,
    on_state: Callable[[State], None] | None = None,
) -> int:
    network.outputs = [0.0] * network.total_outputs
    fitness = 0
    while (
        environment.within_track_bounds()
        and environment.within_angle_bounds()
        and fitness < goal_fitness
    ):
        state = environment.state
        if on_state is not None:
            on_state(state)
        outputs = network.activate(network_inputs(state, markov, network.bias))
        environment.perform_action(outputs[0])
        fitness += 1
    return fitness


def evaluate(
    environment: Environment, network: Network, goal_fitness: int, markov: bool
) -> list[State]:
    """Balance the poles with ``network``, award it the steps survived.

    Returns the states visited, one per step.
    """
    states: list[State] = []
    network.fitness = _run_episode(
        environment,
        network,
        goal_fitness,
        markov,
        lambda state: states.append(dataclasses.replace(state)),
    )
    return states


def evaluate_lesioned(
    environment: Environment, network: Network, goal_fitness: int, markov: bool
) -> int:
    """Return the steps survived by ``network`` without changing its fitness."""
    return _run_episode(environment, network, goal_fitness, markov)


def _write_states(path: Path, states: Sequence[State]) -> None:
    records = [
        {
            "X": s.x,
            "XDot": s.x_dot,
            "Theta1": s.theta1,
            "Theta2": s.theta2,
            "ThetaDot1": s.theta_dot1,
            "ThetaDot2": s.theta_dot2,
        }
        for s in states
    ]
    Path(path).write_text(json.dumps(records), encoding="utf-8")


def _make_network(markov: bool, inputs: int, hidden: int, outputs: int) -> Network:
    cls = FeedForward if markov else Recurrent
    return cls(inputs, hidden, outputs, True)


def _evaluate_split(networks: Sequence[Network], config: Config) -> Network | None:
    best: Network | None = None
    best_fitness = 0
    for network in networks:
        environment = Cartpole(config.short_pole_length)
        environment.reset()
        states = evaluate(environment, network, config.goal_fitness, config.markov)
        if config.simulation and network.fitness == config.goal_fitness:
            _write_states(config.states_path, states)
        if network.fitness > best_fitness:
            best_fitness = network.fitness
            best = network
    print(f"Core best is {best.fitness if best is not None else 0}")
    return best


def _adapt_network_size(
    best: Network,
    best_fitness: int,
    subpops: list[Population],
    hidden: int,
    inputs: int,
    config: Config,
    rng: random.Random | None,
) -> int:
    """Drop a neuron's subpopulation if the network does better without it,
    otherwise add a new subpopulation. Returns the new number of hidden units."""
    print("Adapting network size ...")
    for item, neuron in enumerate(best.hidden_units):
        neuron.lesioned = True
        environment = Cartpole(config.short_pole_length)
        environment.reset()
        lesioned_fitness = evaluate_lesioned(
            environment, best, config.goal_fitness, config.markov
        )
        print("Lesioned Fitness: ", lesioned_fitness)
        if lesioned_fitness > best_fitness and len(best.hidden_units) == hidden:
            del subpops[item]
            hidden -= 1
            print("Subpopulations decreased to ", hidden)
        else:
            neuron.lesioned = False

    if len(best.hidden_units) == hidden:
        hidden += 1
        print("Subpopulations increased to ", hidden)
        gene_size = _make_network(config.markov, inputs, hidden, config.outputs).gene_size
        population = Population(config.size, gene_size, rng)
        population.create()
        if not config.markov:
            for subpop in subpops:
                subpop.grow_individuals()
        subpops.append(population)
    return hidden


def run(config: Config, rng: random.Random | None = None) -> Network | None:
    """Evolve networks until the goal fitness or the generation limit is reached.

    Returns the best network found.
    """
    if config.cpus < 1:
        raise ValueError("at least one CPU is required")
    num_trials = 10 * config.size
    split = num_trials // config.cpus
    if split == 0:
        raise ValueError("more CPUs than evaluations per generation")

    inputs = config.inputs if config.markov else NON_MARKOV_INPUTS
    print(f"Number of inputs (i) is {inputs}.")
    print(f"Number of hidden units (h) is {config.hidden}.")
    print(f"Number of output(s) is {config.outputs}.")
    print(f"Number of individuals per population (n) is {config.size}.")
    print(f"Max generations is {config.max_generations}.")
    print(f"Mutation Rate is set at {config.mutation_rate}.")
    print(f"Burst mutate after {config.burst} constant generations (b).")
    print("Short pole length ", config.short_pole_length * 2)
    print("Number of Logical CPUs on machine ", os.cpu_count())
    print("CPU(s) in use ", config.cpus)

    hidden = config.hidden
    subpops = initialize(
        hidden,
        config.size,
        _make_network(config.markov, inputs, hidden, config.outputs).gene_size,
        rng,
    )
    print("Number of Evaluations per generation ", num_trials)

    performance = [0] * config.burst
    best: Network | None = None
    best_fitness = 0
    generations = 0
    count = 0

    while best_fitness < config.goal_fitness and generations < config.max_generations:
        networks = []
        for _ in range(num_trials):
            network = _make_network(config.markov, inputs, hidden, config.outputs)
            network.create(subpops)
            networks.append(network)

        for core in range(config.cpus):
            core_best = _evaluate_split(
                networks[core * split : (core + 1) * split], config
            )
            if core_best is not None and core_best.fitness > best_fitness:
                best_fitness = core_best.fitness
                best = core_best
                best.tag()

        for network in networks:
            network.set_neuron_fitness()

        print(f"Generation {generations}, best fitness is {best_fitness}")
        performance.append(best_fitness)

        stagnated = False
        if (
            best is not None
            and len(best.hidden_units) == hidden
            and performance[config.burst + generations] == performance[generations]
        ):
            if count == 2:
                hidden = _adapt_network_size(
                    best, best_fitness, subpops, hidden, inputs, config, rng
                )
                count = 0
            else:
                print("Burst Mutate ...")
                stagnated = True
                for subpop, best_neuron in zip(subpops, best.hidden_units):
                    for neuron in subpop.individuals:
                        neuron.perturb(best_neuron, rng)
                count += 1

        if not stagnated:
            for subpop in subpops:
                subpop.sort_neurons()
                subpop.mate()
                subpop.mutate(config.mutation_rate)

        generations += 1

    return best


@contextmanager
def _cpu_profile(path: str) -> Iterator[None]:
    """Record per-function call counts and CPU time, written to ``path``."""
    counts: Counter[str] = Counter()
    totals: defaultdict[str, float] = defaultdict(float)
    stack: list[tuple[str, float]] = []

    def hook(frame, event, arg):
        if event == "call":
            code = frame.f_code
            key = f"{code.co_filename}:{code.co_firstlineno}({code.co_name})"
            stack.append((key, time.process_time()))
        elif event == "c_call":
            key = f"<built-in>({getattr(arg, '__qualname__', repr(arg))})"
            stack.append((key, time.process_time()))
        elif event in ("return", "c_return", "c_exception") and stack:
            key, start = stack.pop()
            totals[key] += time.process_time() - start
            counts[key] += 1

    sys.setprofile(hook)
    try:
        yield
    finally:
        sys.setprofile(None)
        lines = ["calls\tcumtime\tfunction"]
        for key, total in sorted(totals.items(), key=lambda kv: kv[1], reverse=True):
            lines.append(f"{counts[key]}\t{total:.6f}\t{key}")
        Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coopcoev",
        description="Evolve neural network controllers for double pole balancing.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="show this help and exit")
    parser.add_argument(
        "-sim", dest="simulation", action="store_true",
        help="simulate best network on task",
    )
    parser.add_argument(
        "-markov", action="store_true", help="Markov or Non-Markov task"
    )
    parser.add_argument("-cpuprofile", default="", help="write cpu profile to file")
    parser.add_argument("-cpus", type=int, default=1, help="number of cpus to use")
    parser.add_argument(
        "-h", dest="hidden", type=int, default=5,
        help="number of hidden units / subpopulations",
    )
    parser.add_argument(
        "-n", dest="size", type=int, default=100,
        help="number of individuals per subpopulation",
    )
    parser.add_argument("-i", dest="inputs", type=int, default=6, help="number of inputs")
    parser.add_argument(
        "-o", dest="outputs", type=int, default=1, help="number of outputs"
    )
    parser.add_argument(
        "-b", dest="burst", type=int, default=15,
        help="number of generations before burst mutation",
    )
    parser.add_argument(
        "-maxGens", dest="max_generations", type=int, default=100000,
        help="maximum generations",
    )
    parser.add_argument(
        "-goalFitness", dest="goal_fitness", type=int, default=100000,
        help="goal fitness",
    )
    parser.add_argument(
        "-spl", dest="short_pole_length", type=float, default=0.05,
        help="short pole length",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the command line and run the evolution."""
    args = _parser().parse_args(argv)
    config = Config(
        simulation=args.simulation,
        markov=args.markov,
        cpus=args.cpus,
        hidden=args.hidden,
        size=args.size,
        inputs=args.inputs,
        outputs=args.outputs,
        burst=args.burst,
        max_generations=args.max_generations,
        goal_fitness=args.goal_fitness,
        short_pole_length=args.short_pole_length,
    )
    if args.cpuprofile:
        with _cpu_profile(args.cpuprofile):
            run(config)
    else:
        run(config)
    return 0