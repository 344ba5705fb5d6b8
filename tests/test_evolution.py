import json
import random

import pytest

from coopcoev.cartpole import Cartpole, State
from coopcoev.evolution import (
    Config,
    evaluate,
    evaluate_lesioned,
    initialize,
    main,
    network_inputs,
    run,
)
from coopcoev.network import FeedForward, Recurrent


def _network(markov, seed, hidden=2, size=4):
    cls = FeedForward if markov else Recurrent
    inputs = 6 if markov else 3
    net = cls(inputs, hidden, 1, True)
    populations = initialize(hidden, size, net.gene_size, random.Random(seed))
    net.create(populations)
    return net


def _cartpole():
    env = Cartpole(0.05)
    env.reset()
    return env


def test_initialize_matches_benchmark_shape():
    gene_size = FeedForward(6, 5, 1, True).gene_size
    assert gene_size == 8
    pops = initialize(5, 100, gene_size, random.Random(3))
    assert len(pops) == 5
    for pop in pops:
        assert len(pop.individuals) == 100
        assert all(len(n.weight) == 8 for n in pop.individuals)
        assert all(-6.0 <= w < 6.0 for n in pop.individuals for w in n.weight)


def test_network_inputs_markov_with_bias():
    state = State(x=4.8, x_dot=2.0, theta1=0.52, theta2=-0.52, theta_dot1=1.0, theta_dot2=-2.0)
    assert network_inputs(state, True, True) == pytest.approx(
        [1.0, 1.0, 1.0, -1.0, 0.5, -1.0, 0.5]
    )


def test_network_inputs_non_markov():
    state = State(x=2.4, x_dot=5.0, theta1=0.26, theta2=0.0, theta_dot1=3.0, theta_dot2=3.0)
    assert network_inputs(state, False, False) == pytest.approx([0.5, 0.5, 0.0])
    assert network_inputs(state, False, True) == pytest.approx([0.5, 0.5, 0.0, 0.5])


@pytest.mark.parametrize("markov", [True, False])
def test_evaluate_records_states_and_fitness(markov):
    net = _network(markov, seed=7)
    states = evaluate(_cartpole(), net, 10, markov)
    assert 1 <= net.fitness <= 10
    assert len(states) == net.fitness
    assert states[0].theta1 == pytest.approx(0.07)


def test_evaluate_states_are_snapshots():
    net = _network(True, seed=2)
    states = evaluate(_cartpole(), net, 5, True)
    assert len(states) == 5
    assert states[0].x != states[-1].x or states[0].theta1 != states[-1].theta1


def test_evaluate_zero_goal():
    net = _network(True, seed=1)
    assert evaluate(_cartpole(), net, 0, True) == []
    assert net.fitness == 0


def test_evaluate_is_reproducible():
    first = _network(False, seed=11)
    second = _network(False, seed=11)
    evaluate(_cartpole(), first, 300, False)
    evaluate(_cartpole(), second, 300, False)
    assert first.fitness == second.fitness


def test_evaluate_lesioned_leaves_fitness_alone():
    net = _network(True, seed=5)
    net.fitness = 42
    result = evaluate_lesioned(_cartpole(), net, 20, True)
    assert 1 <= result <= 20
    assert net.fitness == 42


def test_fully_lesioned_networks_behave_alike():
    results = []
    for seed in (1, 2):
        net = _network(True, seed=seed)
        for neuron in net.hidden_units:
            neuron.lesioned = True
        results.append(evaluate_lesioned(_cartpole(), net, 1000, True))
    assert results[0] == results[1]


def test_run_reaches_small_goal(capsys):
    config = Config(hidden=2, size=4, max_generations=3, goal_fitness=5)
    best = run(config, random.Random(4))
    out = capsys.readouterr().out
    assert best.fitness == 5
    assert "Number of inputs (i) is 3." in out
    assert "Generation 0, best fitness is 5" in out


def test_run_markov_with_stagnation(capsys):
    config = Config(
        markov=True, hidden=2, size=4, burst=1, max_generations=5, goal_fitness=200
    )
    best = run(config, random.Random(9))
    out = capsys.readouterr().out
    assert 0 < best.fitness <= 200
    generation_lines = [line for line in out.splitlines() if line.startswith("Generation ")]
    assert best.fitness == 200 or len(generation_lines) == 5


def test_run_splits_over_cpus(capsys):
    config = Config(cpus=2, hidden=2, size=4, max_generations=1, goal_fitness=5)
    run(config, random.Random(1))
    out = capsys.readouterr().out
    assert out.count("Core best is") == 2


def test_run_rejects_no_cpus():
    with pytest.raises(ValueError):
        run(Config(cpus=0, hidden=2, size=4), random.Random(1))


def test_run_rejects_too_many_cpus():
    with pytest.raises(ValueError):
        run(Config(cpus=100, hidden=2, size=4), random.Random(1))


def test_simulation_writes_states(tmp_path, capsys):
    path = tmp_path / "states.json"
    config = Config(
        simulation=True, hidden=2, size=4, max_generations=1, goal_fitness=3,
        states_path=path,
    )
    run(config, random.Random(2))
    records = json.loads(path.read_text(encoding="utf-8"))
    assert len(records) == 3
    assert set(records[0]) == {"X", "XDot", "Theta1", "Theta2", "ThetaDot1", "ThetaDot2"}
    assert records[0]["Theta1"] == pytest.approx(0.07)


def test_main_non_markov(capsys):
    code = main(["-n", "4", "-h", "2", "-maxGens", "1", "-goalFitness", "5"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Number of inputs (i) is 3." in out
    assert "Number of hidden units (h) is 2." in out


def test_main_markov(capsys):
    code = main(["-markov", "-n", "4", "-h", "2", "-maxGens", "1", "-goalFitness", "5"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Number of inputs (i) is 6." in out
    assert "Short pole length  0.1" in out


def test_main_writes_profile(tmp_path, capsys):
    profile = tmp_path / "cpu.prof"
    main(["-cpuprofile", str(profile), "-n", "4", "-h", "2", "-maxGens", "1", "-goalFitness", "3"])
    capsys.readouterr()
    assert profile.stat().st_size > 0