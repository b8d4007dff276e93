from __future__ import annotations

import math
from typing import List

import numpy as np
import pytest

from bitsearch.core.config import Config, ConfigurationError
from bitsearch.core.interfaces import EvaluationRecord
from bitsearch.logic.fea import AnnealingSchedule, FrequencyFitnessEA, FrequencyTable, temperature_for
from bitsearch.problems.benchmarks import LeadingOnes, OneMax


class AffineOneMax(OneMax):
    """OneMax con el valor objetivo reescalado de forma estrictamente monotona."""

    def raw_value(self, z: np.ndarray) -> float:
        return 3.0 * super().raw_value(z) + 11.0

    def optimal_value(self) -> float:
        return 3.0 * self.n + 11.0


class RawValues:
    def __init__(self) -> None:
        self.values: List[float] = []

    def activate(self) -> None:
        pass

    def track_problem(self, problem) -> None:
        pass

    def do_log(self, record: EvaluationRecord) -> None:
        self.values.append(record.raw_y)

    def clear(self) -> None:
        self.values.clear()


def test_new_value_is_accepted_over_frequent_one() -> None:
    table = FrequencyTable()
    table.seed(3.0)
    for _ in range(5):
        assert table.observe(3.0, 3.0)
    assert table[3.0] == 10
    assert table.observe(3.0, -100.0)
    assert table[-100.0] == 1


def test_frequent_value_is_rejected_from_rare_current() -> None:
    table = FrequencyTable()
    for _ in range(4):
        table.observe(1.0, 1.0)
    table.seed(2.0)
    assert not table.observe(2.0, 1.0)


def test_equal_frequencies_alternate() -> None:
    table = FrequencyTable()
    table.seed(5.0)
    assert table.observe(5.0, 7.0)
    assert table.observe(7.0, 5.0)
    assert table.observe(5.0, 7.0)
    assert table[5.0] == table[7.0] == 3


def test_neighbour_always_differs() -> None:
    fea = FrequencyFitnessEA(Config(seed=0))
    x = np.zeros(50, dtype=np.int8)
    for _ in range(100):
        assert fea.neighbour(x).any()
    assert not x.any()


def test_run_consumes_exact_budget() -> None:
    problem = OneMax(200)
    fea = FrequencyFitnessEA(Config(eval_budget=50, seed=1))
    state = fea.run(problem)
    assert state.evaluations == 50
    assert problem.evaluations == 50


def test_invariant_under_monotone_rescaling() -> None:
    plain, scaled = RawValues(), RawValues()
    FrequencyFitnessEA(Config(eval_budget=400), np.random.default_rng(5), trajectory_logger=plain).run(
        OneMax(24)
    )
    FrequencyFitnessEA(Config(eval_budget=400), np.random.default_rng(5), trajectory_logger=scaled).run(
        AffineOneMax(24)
    )
    assert len(plain.values) == len(scaled.values)
    assert scaled.values == [3.0 * y + 11.0 for y in plain.values]


def test_elitist_variant_keeps_best_value() -> None:
    fea = FrequencyFitnessEA(Config(eval_budget=300, seed=2), acceptance="elitist")
    state = fea.run(LeadingOnes(40))
    assert fea.current_y == state.best_fitness
    assert len(fea.table) == 0


def test_fea_solves_small_onemax() -> None:
    fea = FrequencyFitnessEA(Config(eval_budget=20000, seed=3))
    state = fea.run(OneMax(12))
    assert state.optimum_found
    assert state.best_fitness == 12.0


def test_unknown_acceptance_rule() -> None:
    with pytest.raises(ConfigurationError):
        FrequencyFitnessEA(Config(), acceptance="greedy")


def test_elitist_never_accepts_worse() -> None:
    fea = FrequencyFitnessEA(Config(seed=0), acceptance="elitist")
    fea.current_y = 10.0
    assert fea.accepts(10.0)
    assert fea.accepts(11.0)
    assert not fea.accepts(9.0)


def test_auto_schedule_matches_acceptance_targets() -> None:
    schedule = AnnealingSchedule.auto(40, 1000)
    assert schedule.t_start == pytest.approx(10.0 / math.log(10.0))
    assert schedule.t_end == pytest.approx(2.0 / math.log(1000.0))
    assert schedule.temperature(1) == pytest.approx(schedule.t_start)
    assert schedule.temperature(1000) == pytest.approx(schedule.t_end)
    assert math.exp(-10.0 / schedule.t_start) == pytest.approx(0.1)
    assert 0.0 < schedule.epsilon < 1.0


@pytest.mark.parametrize(
    "delta, probability",
    [(0.0, 0.5), (-1.0, 0.5), (float("inf"), 0.5), (1.0, 0.0), (1.0, 1.0), (1.0, float("nan"))],
)
def test_temperature_preconditions(delta: float, probability: float) -> None:
    with pytest.raises(ConfigurationError):
        temperature_for(delta, probability)


def test_auto_schedule_rejects_unusable_settings() -> None:
    with pytest.raises(ConfigurationError):
        AnnealingSchedule.auto(40, 1)
    with pytest.raises(ConfigurationError):
        AnnealingSchedule.auto(8, 1000)
    # Con n=9 la temperatura inicial queda por debajo de 1.
    with pytest.raises(ConfigurationError):
        FrequencyFitnessEA(Config(eval_budget=100), acceptance="annealing").run(OneMax(9))


def test_annealing_acceptance_follows_temperature() -> None:
    fea = FrequencyFitnessEA(Config(seed=0), acceptance="annealing")
    fea.current_y = 10.0
    fea.step = 1
    fea.schedule = AnnealingSchedule(1e9, 1.0, 0.5)
    assert fea.accepts(11.0)
    assert all(fea.accepts(9.0) for _ in range(50))
    fea.schedule = AnnealingSchedule(1e-3, 1e-4, 0.5)
    assert not any(fea.accepts(9.0) for _ in range(50))
    assert fea.accepts(10.0)


def test_annealing_run_consumes_exact_budget() -> None:
    problem = OneMax(200)
    fea = FrequencyFitnessEA(Config(eval_budget=300, seed=6), acceptance="annealing")
    state = fea.run(problem)
    assert state.evaluations == 300
    assert problem.evaluations == 300
    assert fea.schedule == AnnealingSchedule.auto(200, 300)
    assert len(fea.table) == 0


def test_annealing_solves_small_onemax() -> None:
    state = FrequencyFitnessEA(Config(eval_budget=20000, seed=3), acceptance="annealing").run(OneMax(16))
    assert state.optimum_found


def test_restarts_double_the_inner_budget() -> None:
    fea = FrequencyFitnessEA(Config(eval_budget=3500, seed=8), acceptance="annealing", restarts=True)
    state = fea.run(OneMax(500))
    assert state.evaluations == 3500
    # Ejecuciones internas de 1024 y 2048 evaluaciones antes del tercer arranque.
    assert fea.restart_count == 2
    assert fea.inner_budget == 4096
    assert fea.schedule == AnnealingSchedule.auto(500, 4096)


def test_restarts_require_annealing() -> None:
    with pytest.raises(ConfigurationError):
        FrequencyFitnessEA(Config(), acceptance="frequency", restarts=True)
