from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..core.interfaces import EvaluationRecord, Problem
from ..core.telemetry import LOGGER_NAME

TRAJECTORY_HEADER: list[str] = ["run", "evaluations", "raw_y", "best_so_far_y"]

DEFAULT_BUFFER_SIZE = 512


def _slug(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.+-]+", "_", text).strip("_") or "algorithm"


class CsvTrajectoryLogger:
    """
    Buffered per-evaluation trajectory logger.

    One CSV file is written per (problem, instance, dimension); every call to
    `track_problem` on the same triple opens a new run block in that file.
    """

    def __init__(
        self,
        base_dir: Path | str,
        algorithm_name: str,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.algorithm_name = algorithm_name
        self.output_dir = self.base_dir / _slug(algorithm_name)
        self.buffer_size = max(1, int(buffer_size))
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.active = False
        self._files: Dict[Tuple[int, int, int], Any] = {}
        self._writers: Dict[Tuple[int, int, int], Any] = {}
        self._runs: Dict[Tuple[int, int, int], int] = {}
        self._current: Optional[Tuple[int, int, int]] = None
        self._buffer: List[list[str]] = []
        self.paths: List[Path] = []

    def activate(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.active = True

    def track_problem(self, problem: Problem) -> None:
        if not self.active:
            self.activate()
        self.flush()
        key = (int(problem.problem_id), int(problem.instance_id), int(problem.dimension()))
        if key not in self._files:
            name = f"f{key[0]}_{_slug(problem.name)}_i{key[1]}_d{key[2]}.csv"
            path = self.output_dir / name
            handle = path.open("w", newline="", encoding="utf-8")
            self.paths.append(path)
            writer = csv.writer(handle)
            writer.writerow(TRAJECTORY_HEADER)
            self._files[key] = handle
            self._writers[key] = writer
            self._runs[key] = 0
        self._runs[key] += 1
        self._current = key

    def do_log(self, record: EvaluationRecord) -> None:
        if self._current is None:
            raise RuntimeError("do_log() called before track_problem().")
        self._buffer.append(
            [
                str(self._runs[self._current]),
                str(record.evaluations),
                repr(float(record.raw_y)),
                repr(float(record.best_so_far_y)),
            ]
        )
        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        if self._current is None or not self._buffer:
            return
        pending, self._buffer = self._buffer, []
        handle = self._files[self._current]
        self._writers[self._current].writerows(pending)
        handle.flush()

    def clear(self) -> None:
        self.flush()
        for handle in self._files.values():
            handle.close()
        if self.logger and self._files:
            self.logger.info(
                "Trajectory logs for %s closed (%d files in %s)",
                self.algorithm_name,
                len(self._files),
                self.output_dir,
            )
        self._files.clear()
        self._writers.clear()
        self._runs.clear()
        self._current = None
