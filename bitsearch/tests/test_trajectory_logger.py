from __future__ import annotations

import csv
from pathlib import Path

import pytest

from bitsearch.core.config import Config
from bitsearch.core.interfaces import EvaluationRecord, TrajectoryLogger
from bitsearch.logic.engine import EvolutionEngine
from bitsearch.problems.benchmarks import LeadingOnes, OneMax
from bitsearch.tracking import TRAJECTORY_HEADER, CsvTrajectoryLogger


def _read(path: Path) -> list[list[str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.reader(handle))


def test_engine_runs_are_written_per_problem(tmp_path: Path) -> None:
    logger = CsvTrajectoryLogger(tmp_path, "(1+1) EA", buffer_size=7)
    assert isinstance(logger, TrajectoryLogger)
    logger.activate()
    engine = EvolutionEngine(Config(mutation_rate_scale=1.0, eval_budget=60, seed=1))
    engine.assign_logger(logger)
    states = engine.run_n(OneMax(40), runs=2)
    engine.run(LeadingOnes(40))
    logger.clear()

    assert len(logger.paths) == 2
    rows = _read(logger.paths[0])
    assert rows[0] == TRAJECTORY_HEADER
    body = rows[1:]
    assert len(body) == sum(s.evaluations for s in states)
    assert {row[0] for row in body} == {"1", "2"}
    for run in ("1", "2"):
        evals = [int(r[1]) for r in body if r[0] == run]
        best = [float(r[3]) for r in body if r[0] == run]
        assert evals == list(range(1, len(evals) + 1))
        assert best == sorted(best)
    assert logger.paths[1].name.startswith("f2_LeadingOnes_i1_d40")


def test_log_before_tracking_is_an_error(tmp_path: Path) -> None:
    logger = CsvTrajectoryLogger(tmp_path, "ea")
    with pytest.raises(RuntimeError):
        logger.do_log(EvaluationRecord(1, 0.0, 0.0))
