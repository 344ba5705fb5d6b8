# coopcoev

This package applies neuroevolution by cooperative coevolution (Enforced
SubPopulations) to the double pole balancing task.

Each hidden unit of a neural network evolves in its own subpopulation of
neurons. A network is built by drawing one neuron from each subpopulation.
The network is then scored on a simulated cart that carries two poles. The
score is the number of time steps the network keeps both poles up and the
cart on the track. Each neuron collects the scores of the networks it took
part in. Neurons are ranked by their average score.

When the best score does not improve for `b` generations, the search
burst-mutates around the best network. After two burst mutations without
progress, it changes the number of hidden units. It removes a hidden unit
when the best network scores higher without that unit. If no unit is
removed, it adds one.

The task comes in two variants:

- **Markov** (`-markov`): the network sees the cart position and velocity,
  and the angle and angular velocity of each pole. It is a feed-forward
  network.
- **Non-Markov** (the default): the network sees only the cart position and
  the two pole angles. It is a recurrent network.

## Installation

```
pip install .
```

The package needs nothing outside the standard library. To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
coopcoev [options]
```

Options start with a single dash. The one exception is `--help`, because
`-h` sets the number of hidden units.

| option               | default | meaning                                                   |
|----------------------|---------|-----------------------------------------------------------|
| `-markov`            | off     | run the Markov task with a feed-forward network           |
| `-sim`               | off     | write the states of a run that reaches the goal fitness to `simulation/processingjs/json/states.json` |
| `-cpus N`            | 1       | number of batches each generation's evaluations are split into |
| `-h N`               | 5       | number of hidden units, which is also the number of subpopulations |
| `-n N`               | 100     | individuals per subpopulation                             |
| `-i N`               | 6       | inputs (the non-Markov task always uses 3)                |
| `-o N`               | 1       | outputs                                                   |
| `-b N`               | 15      | generations without improvement before a burst mutation   |
| `-maxGens N`         | 100000  | maximum number of generations                             |
| `-goalFitness N`     | 100000  | number of steps that counts as solving the task           |
| `-spl X`             | 0.05    | half length of the short pole                             |
| `-cpuprofile FILE`   | none    | write call counts and CPU time per function to `FILE`     |
| `--help`             |         | show help and exit                                        |

Each generation evaluates `10 * n` networks. After every batch the program
prints that batch's best score. After every generation it prints the best
fitness found so far. The mutation rate is fixed at 0.4.

## Library use

```python
import random

from coopcoev.evolution import Config, run

rng = random.Random(1)
config = Config(markov=True, max_generations=50, goal_fitness=1000)
best = run(config, rng)  # the best network found, or None
if best is not None:
    print(best.fitness)
```

The parts can also be used on their own:

- `coopcoev.evolution`:
  - `Config` holds the settings for a run.
  - `run(config, rng)` runs the evolution.
  - `initialize(hidden_units, size, gene_size, rng)` creates the
    subpopulations.
  - `network_inputs(state, markov, bias)` scales a state into network
    inputs.
  - `evaluate(environment, network, goal_fitness, markov)` sets the
    network's fitness and returns the states it visited.
  - `evaluate_lesioned(...)` returns the score and leaves the network's
    fitness unchanged.
  - `main(argv)` is the command-line entry point.
- `coopcoev.cartpole`:
  - `Cartpole(length2)` simulates the cart and the two poles. `reset()`
    tilts the long pole. `perform_action(action)` applies a force for one
    time step, for an action in `[0, 1]`. `within_track_bounds()` and
    `within_angle_bounds()` tell whether the run is still alive.
  - `State` holds the six state variables.
  - `Environment` is the protocol that `Cartpole` satisfies.
- `coopcoev.network`:
  - `FeedForward` and `Recurrent` are subclasses of `Network`.
  - `create(populations)` takes one neuron from each subpopulation.
  - `activate(inputs)` returns the outputs.
  - `set_neuron_fitness()`, `tag()`, `reset_activation()` and
    `reset_fitness()` manage the network's state.
  - `gene_size` is the number of weights each hidden neuron holds.
  - `total_inputs` counts the bias input.
- `coopcoev.population`:
  - `Population(size, gene_size, rng)` provides `create`, `select_neuron`,
    `sort_neurons`, `mate`, `mutate(rate)` and `grow_individuals`.
  - `one_point_crossover(parent1, parent2, child1, child2, rng)` is also
    available as a separate function.
- `coopcoev.neuron.Neuron` holds a weight vector, its cumulative fitness and
  its trial count. It provides `create`, `add_fitness`, `perturb` and
  `reset_fitness`.
- `coopcoev.cauchy.cauchy(wtrange, rng)` draws from a Cauchy distribution
  truncated to magnitude 10.
- `coopcoev.activation.logistic(b, t)` is the logistic sigmoid function.
- `coopcoev.rk4.Point` and `coopcoev.euler.Point` integrate an ordinary
  differential equation. `solve(dx, dydx, x_final)` uses the fourth-order
  Runge-Kutta method and the Euler method respectively.

## What it does not do

- The evaluations run one after another in a single process. `-cpus` only
  changes how they are split into batches. The program does not start
  worker processes.
- `-sim` only writes the visited states to a JSON file. It does not create
  the directory for that file, and it does not display or animate the
  states.