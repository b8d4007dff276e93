"""
High-resolution timing instrumentation for the search engines.
"""

from __future__ import annotations

from .logger import (
    CSV_HEADER,
    PERF_TIMINGS_ENABLED,
    TimingLogger,
    configure_global_logger,
    get_timing_logger,
    shutdown_logger,
)
from .timers import time_block, time_section

__all__ = [
    "CSV_HEADER",
    "PERF_TIMINGS_ENABLED",
    "TimingLogger",
    "configure_global_logger",
    "get_timing_logger",
    "shutdown_logger",
    "time_block",
    "time_section",
]
