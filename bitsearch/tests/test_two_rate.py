from __future__ import annotations

import numpy as np
import pytest

from bitsearch.core.config import Config
from bitsearch.core.population import Population
from bitsearch.logic.mutation import BinomialStrength
from bitsearch.logic.two_rate import TwoRateEA
from bitsearch.problems.benchmarks import OneMax


def _prepared(n: int, initial_rate: float = 2.0) -> TwoRateEA:
    algo = TwoRateEA(Config(eval_budget=100000, seed=1), initial_rate=initial_rate)
    algo.assign_problem(OneMax(n))
    algo.prepare()
    return algo


def test_forces_single_parent_and_ten_offspring() -> None:
    algo = TwoRateEA(Config(mu=4, lam=3, mutation="STATICSAMPLE", crossover_probability=0.9))
    assert (algo.mu, algo.lam) == (1, 10)
    assert algo.ops.crossover_probability == 0.0
    assert isinstance(algo.mutation, BinomialStrength)


def test_half_of_the_offspring_use_each_rate() -> None:
    algo = _prepared(64, initial_rate=4.0)
    algo.initialize()
    assert algo.generation_step()
    assert algo.child_rates == [2.0] * 5 + [8.0] * 5
    assert len(algo.offspring) == 10


def test_rate_is_clamped_to_quarter_dimension() -> None:
    algo = _prepared(40, initial_rate=100.0)
    assert algo.rate == 10.0
    algo = _prepared(40, initial_rate=0.5)
    assert algo.rate == 2.0


def test_adaptation_moves_towards_winning_rate() -> None:
    algo = _prepared(64, initial_rate=4.0)
    algo.child_rates = [2.0] * 5 + [8.0] * 5
    fitness = [10.0] * 10
    fitness[7] = 30.0
    outcomes = []
    for _ in range(400):
        algo.rate = 4.0
        algo.offspring = Population(64, [np.zeros(64, dtype=np.int8)] * 10, fitness)
        algo.adaptive_strategy()
        outcomes.append(algo.rate)
    assert set(outcomes) <= {2.0, 8.0}
    # El ganador usa 2r: se adopta con probabilidad 1/2 + 1/4.
    assert outcomes.count(8.0) > outcomes.count(2.0)


def test_adaptive_hook_runs_once_per_completed_generation() -> None:
    algo = TwoRateEA(Config(eval_budget=3000, seed=7))
    state = algo.run(OneMax(64))
    completed = (state.evaluations - 1) // 10
    assert len(algo.rate_trace) in (completed - 1, completed)
    assert all(2.0 <= r <= 16.0 for r in algo.rate_trace)


def test_solves_onemax() -> None:
    state = TwoRateEA(Config(eval_budget=20000, seed=3)).run(OneMax(24))
    assert state.optimum_found
    assert state.best_fitness == 24.0


def test_rejects_single_offspring() -> None:
    with pytest.raises(ValueError):
        TwoRateEA(Config(), lam=1)
