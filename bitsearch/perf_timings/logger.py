from __future__ import annotations

import atexit
import csv
import json
import os
import sys
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

CSV_HEADER: list[str] = [
    "run_id",
    "run_index",
    "generation",
    "offspring",
    "section",
    "start_ns",
    "end_ns",
    "duration_us",
    "extra",
]


def _env_flag(name: str, default: str = "0") -> bool:
    raw = os.getenv(name, default)
    return raw.strip().lower() not in {"0", "false", "off", "no", ""}


PERF_TIMINGS_ENABLED = _env_flag("BITSEARCH_TIMINGS", "0")

DEFAULT_BUFFER_SIZE = 256
DEFAULT_TIMINGS_DIR = Path(os.getenv("BITSEARCH_TIMINGS_DIR", "artifacts/timings"))


@dataclass(frozen=True)
class TimingRecord:
    run_id: str
    run_index: int
    generation: int
    offspring: int
    section: str
    start_ns: int
    end_ns: int
    duration_us: int
    extra: str

    def as_row(self) -> list[str]:
        return [
            self.run_id,
            str(self.run_index),
            str(self.generation),
            str(self.offspring),
            self.section,
            str(self.start_ns),
            str(self.end_ns),
            str(self.duration_us),
            self.extra,
        ]


class TimingLogger:
    """
    Buffered CSV logger for engine section timings.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        base_dir: Optional[Path | str] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.enabled = bool(enabled)
        self.run_id = str(uuid.uuid4())
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.base_dir = Path(base_dir) if base_dir else DEFAULT_TIMINGS_DIR
        self.buffer_size = max(1, int(buffer_size))
        self.csv_path = self.base_dir / f"timings_{self.run_id}_{stamp}.csv"
        self._buffer: list[TimingRecord] = []
        self._csv_file: Optional[Any] = None
        self._csv_writer: Optional[Any] = None
        self._closed = False
        atexit.register(self.close)

    @property
    def path(self) -> Path:
        return self.csv_path

    def record(
        self,
        *,
        section: str,
        start_ns: int,
        end_ns: Optional[int] = None,
        run_index: int = -1,
        generation: int = -1,
        offspring: int = -1,
        extra: Optional[Any] = None,
    ) -> None:
        if not self.enabled or self._closed:
            return
        try:
            end = int(end_ns if end_ns is not None else time.perf_counter_ns())
            end = max(end, int(start_ns))
            self._buffer.append(
                TimingRecord(
                    run_id=self.run_id,
                    run_index=int(run_index),
                    generation=int(generation),
                    offspring=int(offspring),
                    section=str(section),
                    start_ns=int(start_ns),
                    end_ns=end,
                    duration_us=max(1, (end - int(start_ns)) // 1_000),
                    extra=self._serialize_extra(extra),
                )
            )
        except (TypeError, ValueError) as exc:
            self._log_error(exc)
            return
        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        if not self.enabled or not self._buffer:
            return
        pending, self._buffer = self._buffer, []
        try:
            if self._csv_file is None:
                self.base_dir.mkdir(parents=True, exist_ok=True)
                self._csv_file = self.csv_path.open("a", newline="", encoding="utf-8")
                self._csv_writer = csv.writer(self._csv_file)
                self._csv_writer.writerow(CSV_HEADER)
            self._csv_writer.writerows(record.as_row() for record in pending)
            self._csv_file.flush()
        except OSError as exc:
            # Sin destino escribible se descartan las mediciones y se desactiva.
            self._log_error(exc)
            self.enabled = False

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        if self._csv_file is not None:
            try:
                self._csv_file.close()
            except OSError as exc:
                self._log_error(exc)
            finally:
                self._csv_file = None
        self._closed = True

    @staticmethod
    def _serialize_extra(extra: Optional[Any]) -> str:
        if extra is None:
            return "{}"
        if isinstance(extra, str):
            return extra.strip() or "{}"
        try:
            return json.dumps(extra, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"value": str(extra)}, separators=(",", ":"))

    @staticmethod
    def _log_error(exc: Exception) -> None:
        sys.stderr.write(f"[perf_timings] logger error: {exc}\n")


_GLOBAL_LOGGER: Optional[TimingLogger] = None


def get_timing_logger() -> TimingLogger:
    global _GLOBAL_LOGGER
    if _GLOBAL_LOGGER is None:
        _GLOBAL_LOGGER = TimingLogger(enabled=PERF_TIMINGS_ENABLED)
    return _GLOBAL_LOGGER


def configure_global_logger(**kwargs: Any) -> TimingLogger:
    global _GLOBAL_LOGGER
    if _GLOBAL_LOGGER is not None:
        _GLOBAL_LOGGER.close()
    _GLOBAL_LOGGER = TimingLogger(**kwargs)
    return _GLOBAL_LOGGER


def shutdown_logger() -> None:
    global _GLOBAL_LOGGER
    if _GLOBAL_LOGGER is not None:
        _GLOBAL_LOGGER.close()
        _GLOBAL_LOGGER = None
