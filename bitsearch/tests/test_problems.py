from __future__ import annotations

import numpy as np
import pytest

from bitsearch.core.config import ConfigurationError
from bitsearch.core.interfaces import Problem
from bitsearch.problems import BenchmarkSuite, LeadingOnes, OneMax, make_problem, parse_id_range, parse_int_list


def test_onemax_and_leadingones_values() -> None:
    assert OneMax(5).evaluate([1, 0, 1, 1, 0]) == 3.0
    assert LeadingOnes(5).evaluate([1, 1, 0, 1, 1]) == 2.0
    assert LeadingOnes(3).evaluate([1, 1, 1]) == 3.0
    assert LeadingOnes(3).evaluate([0, 1, 1]) == 0.0


def test_hit_flag_and_reset() -> None:
    problem = OneMax(4)
    assert isinstance(problem, Problem)
    problem.evaluate([1, 1, 0, 1])
    assert not problem.hit_optimal()
    problem.evaluate([1, 1, 1, 1])
    assert problem.hit_optimal()
    assert problem.evaluations == 2
    problem.reset()
    assert not problem.hit_optimal()
    assert problem.evaluations == 0


def test_shifted_instance_moves_optimum() -> None:
    problem = OneMax(16, instance_id=2)
    optimum = 1 - problem.mask
    assert problem.evaluate(optimum) == 16.0
    assert problem.hit_optimal()
    again = OneMax(16, instance_id=2)
    assert np.array_equal(again.mask, problem.mask)


def test_wrong_length_candidate() -> None:
    with pytest.raises(ValueError):
        OneMax(4).evaluate([1, 0])


def test_make_problem_unknown_id() -> None:
    assert isinstance(make_problem(2, 1, 8), LeadingOnes)
    with pytest.raises(ConfigurationError):
        make_problem(99, 1, 8)


def test_parse_ranges_and_lists() -> None:
    assert parse_id_range("1-3") == [1, 2, 3]
    assert parse_id_range("2") == [2]
    assert parse_int_list("10,100") == [10, 100]
    assert parse_id_range("1-2,5", 1, 10) == [1, 2, 5]
    for raw in ("0-3", "abc", "3-1", ""):
        with pytest.raises(ConfigurationError):
            parse_id_range(raw, 1, 100)
    with pytest.raises(ConfigurationError):
        parse_int_list("1", 2, 20000)


def test_suite_order_and_exhaustion() -> None:
    suite = BenchmarkSuite([1, 2], [1, 3], [8, 16])
    assert len(suite) == 8
    seen = []
    problem = suite.next_problem()
    while problem is not None:
        seen.append((problem.problem_id, problem.instance_id, problem.dimension()))
        problem = suite.next_problem()
    assert seen[:3] == [(1, 1, 8), (1, 1, 16), (1, 3, 8)]
    assert len(seen) == 8
    assert suite.next_problem() is None
    suite.rewind()
    assert suite.next_problem() is not None


def test_suite_rejects_unknown_names_and_ids() -> None:
    with pytest.raises(ConfigurationError):
        BenchmarkSuite([1], name="wmodel")
    with pytest.raises(ConfigurationError):
        BenchmarkSuite([1, 7])
