from __future__ import annotations

import logging
from typing import List

import numpy as np
import pytest

from bitsearch.core.config import Config
from bitsearch.logic.lambda_lambda import OneLambdaLambdaEA
from bitsearch.logic.mutation import BinomialStrength
from bitsearch.logic.crossover import UniformCrossover
from bitsearch.problems.benchmarks import OneMax


def _prepared(n: int, initial_lambda: float = 1.0) -> OneLambdaLambdaEA:
    algo = OneLambdaLambdaEA(Config(seed=1), initial_lambda=initial_lambda)
    algo.assign_problem(OneMax(n))
    algo.prepare()
    return algo


def test_forces_single_parent_with_uniform_crossover() -> None:
    algo = OneLambdaLambdaEA(Config(mu=5, lam=5, mutation="STATICSAMPLE"))
    assert algo.mu == 1
    assert isinstance(algo.mutation, BinomialStrength)
    assert isinstance(algo.crossover, UniformCrossover)


def test_rates_follow_lambda() -> None:
    algo = _prepared(20, initial_lambda=4.0)
    assert algo.mutation.rate == pytest.approx(4.0 / 20)
    assert algo.crossover.p_u == pytest.approx(0.25)


def test_lambda_stays_within_bounds_for_any_outcome_sequence() -> None:
    algo = _prepared(10)
    rng = np.random.default_rng(0)
    for _ in range(500):
        algo.adapt_lambda(bool(rng.random() < 0.2))
        assert 1.0 <= algo.lambda_value <= 10.0
        assert algo.mutation.rate == pytest.approx(algo.lambda_value / 10)
        assert algo.crossover.p_u == pytest.approx(1.0 / algo.lambda_value)


def test_lambda_saturates_at_both_ends() -> None:
    algo = _prepared(10)
    for _ in range(100):
        algo.adapt_lambda(False)
    assert algo.lambda_value == 10.0
    for _ in range(100):
        algo.adapt_lambda(True)
    assert algo.lambda_value == 1.0


def test_success_shrinks_and_failure_grows() -> None:
    algo = _prepared(50, initial_lambda=8.0)
    algo.adapt_lambda(True)
    assert algo.lambda_value == pytest.approx(8.0 * 2.0 / 3.0)
    algo.adapt_lambda(False)
    assert algo.lambda_value == pytest.approx(8.0 * 2.0 / 3.0 * 1.5 ** 0.25)


def test_initial_lambda_is_capped_by_dimension() -> None:
    algo = _prepared(6, initial_lambda=50.0)
    assert algo.lambda_value == 6.0


def test_solves_onemax_with_bounded_lambda() -> None:
    algo = OneLambdaLambdaEA(Config(eval_budget=20000, seed=3))
    state = algo.run(OneMax(20))
    assert state.optimum_found
    assert state.best_fitness == 20.0
    assert algo.lambda_trace
    assert all(1.0 <= lam <= 20.0 for lam in algo.lambda_trace)


def test_parent_fitness_never_decreases() -> None:
    algo = OneLambdaLambdaEA(Config(eval_budget=600, seed=4))
    algo.assign_problem(OneMax(60))
    algo.prepare()
    algo.initialize()
    previous = algo.parents.fitness[0]
    while not algo.termination():
        if not algo.generation_step():
            break
        assert algo.parents.fitness[0] >= previous
        previous = algo.parents.fitness[0]


def test_rejects_lambda_below_one() -> None:
    with pytest.raises(ValueError):
        OneLambdaLambdaEA(Config(), initial_lambda=0.5)


class MessageList(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.INFO)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def _initialized(initial_lambda: float) -> OneLambdaLambdaEA:
    algo = OneLambdaLambdaEA(Config(eval_budget=100000, seed=9), initial_lambda=initial_lambda)
    algo.assign_problem(OneMax(200))
    algo.prepare()
    algo.initialize()
    return algo


def test_crossover_without_mutant_bits_reuses_parent_fitness() -> None:
    algo = _initialized(4.0)
    algo.crossover.p_u = 0.0
    before = algo.problem.evaluations
    assert algo.generation_step()
    # Solo se evaluan los 4 mutantes; los 4 cruces repiten al padre.
    assert algo.problem.evaluations - before == 4
    assert algo.run_state.evaluations == before + 4


def test_crossover_copying_the_mutant_reuses_its_fitness() -> None:
    algo = _initialized(4.0)
    algo.crossover.p_u = 1.0
    before = algo.problem.evaluations
    assert algo.generation_step()
    assert algo.problem.evaluations - before == 4
    assert len(algo.offspring) == 4


def test_mixed_crossover_children_are_evaluated() -> None:
    algo = _initialized(6.0)
    algo.crossover.p_u = 0.5
    algo.mutation.set_rate(0.5)
    before = algo.problem.evaluations
    assert algo.generation_step()
    # Con ~100 bits distintos ningun cruce coincide con el padre ni con el mutante.
    assert algo.problem.evaluations - before == 12


def test_run_start_reports_current_offspring_count() -> None:
    logger = logging.getLogger("bitsearch.tests.lambda_lambda")
    logger.setLevel(logging.INFO)
    handler = MessageList()
    logger.addHandler(handler)
    try:
        OneLambdaLambdaEA(Config(eval_budget=50, seed=1), initial_lambda=6.0, logger=logger).run(
            OneMax(30)
        )
    finally:
        logger.removeHandler(handler)
    started = [m for m in handler.messages if "started" in m]
    assert "lambda=6 |" in started[0]
