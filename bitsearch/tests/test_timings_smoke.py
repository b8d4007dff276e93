from __future__ import annotations

import csv
import time
from pathlib import Path

from bitsearch.core.config import Config
from bitsearch.logic.engine import EvolutionEngine
from bitsearch.perf_timings import (
    CSV_HEADER,
    configure_global_logger,
    shutdown_logger,
    time_block,
    time_section,
)
from bitsearch.problems.benchmarks import OneMax


def _rows(path: Path) -> list[list[str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.reader(handle))


def test_time_block_and_decorator(tmp_path: Path) -> None:
    logger = configure_global_logger(enabled=True, base_dir=tmp_path, buffer_size=1)

    with time_block("generation", run_index=1, generation=2, extra={"test": True}):
        time.sleep(0.0001)

    @time_section("selection", run_index=0, generation=lambda g: g)
    def _dummy(generation: int) -> int:
        time.sleep(0.0001)
        return 5

    assert _dummy(7) == 5
    logger.flush()
    csv_path = logger.path
    assert csv_path.exists()

    rows = _rows(csv_path)
    assert rows[0] == CSV_HEADER
    assert len(rows) >= 3  # header + at least two entries
    for row in rows[1:]:
        duration = int(row[7])
        assert duration >= 1
    assert rows[2][4] == "selection"
    assert rows[2][2] == "7"
    shutdown_logger()


def test_engine_sections_are_recorded(tmp_path: Path) -> None:
    logger = configure_global_logger(enabled=True, base_dir=tmp_path, buffer_size=8)
    engine = EvolutionEngine(Config(mu=2, lam=2, mutation_rate_scale=1.0, eval_budget=30, seed=3))
    engine.run(OneMax(50))
    logger.flush()
    sections = {row[4] for row in _rows(logger.path)[1:]}
    assert {"initialization", "generation", "selection", "run"} <= sections
    shutdown_logger()


def test_disabled_logger_writes_nothing(tmp_path: Path) -> None:
    logger = configure_global_logger(enabled=False, base_dir=tmp_path)
    with time_block("generation"):
        pass
    logger.flush()
    assert not logger.path.exists()
    shutdown_logger()


def test_unwritable_timings_dir_does_not_break_run(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    logger = configure_global_logger(enabled=True, base_dir=blocker / "timings", buffer_size=1)
    engine = EvolutionEngine(Config(mu=2, lam=2, mutation_rate_scale=1.0, eval_budget=30, seed=3))

    state = engine.run(OneMax(30))

    assert state.evaluations == 30
    assert not logger.enabled
    assert "[perf_timings] logger error" in capsys.readouterr().err
    logger.close()
    shutdown_logger()


def test_failing_resolvers_are_recorded_not_raised(tmp_path: Path) -> None:
    logger = configure_global_logger(enabled=True, base_dir=tmp_path, buffer_size=1)

    def _broken(*args, **kwargs):
        raise RuntimeError("boom")

    with time_block("generation", run_index="not-a-number", extra=_broken):
        pass

    @time_section("run", run_index=_broken)
    def _work() -> int:
        return 3

    assert _work() == 3
    logger.flush()
    rows = _rows(logger.path)
    assert rows[1][1] == "-1"
    assert "extra_error" in rows[1][8]
    assert rows[2][4] == "run"
    assert rows[2][1] == "-1"
    shutdown_logger()
