from __future__ import annotations

import contextlib
import functools
import time
from typing import Any, Callable, Optional

from .logger import TimingLogger, get_timing_logger


def _resolve(value: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    if callable(value):
        try:
            return value(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            return {"resolver_error": str(exc)}
    return value


def _to_int(value: Any, default: int = -1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class _TimingBlock(contextlib.ContextDecorator):
    def __init__(
        self,
        section: str,
        *,
        run_index: Any = -1,
        generation: Any = -1,
        offspring: Any = -1,
        extra: Optional[Any] = None,
    ) -> None:
        self.section = section
        self.run_index = run_index
        self.generation = generation
        self.offspring = offspring
        self.extra = extra
        self._start_ns: Optional[int] = None
        self._logger: Optional[TimingLogger] = None

    def __enter__(self) -> "_TimingBlock":
        logger = get_timing_logger()
        if logger.enabled:
            self._logger = logger
            self._start_ns = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> bool:
        if self._logger is None or self._start_ns is None:
            return False
        end_ns = time.perf_counter_ns()
        try:
            payload = self.extra() if callable(self.extra) else self.extra
        except Exception as exc:  # noqa: BLE001
            payload = {"extra_error": str(exc)}
        try:
            self._logger.record(
                section=self.section,
                start_ns=self._start_ns,
                end_ns=end_ns,
                run_index=_to_int(self.run_index),
                generation=_to_int(self.generation),
                offspring=_to_int(self.offspring),
                extra=payload,
            )
        except Exception as exc:  # noqa: BLE001
            # La instrumentacion nunca interrumpe al codigo medido.
            self._logger._log_error(exc)
        return False


def time_block(
    section: str,
    *,
    run_index: Any = -1,
    generation: Any = -1,
    offspring: Any = -1,
    extra: Optional[Any] = None,
) -> _TimingBlock:
    """
    Context manager for ad-hoc timing blocks.
    """

    return _TimingBlock(
        section,
        run_index=run_index,
        generation=generation,
        offspring=offspring,
        extra=extra,
    )


def time_section(
    section: str,
    *,
    run_index: Any = -1,
    generation: Any = -1,
    extra: Optional[Any] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator that records execution time for the wrapped callable.

    `run_index`, `generation` and `extra` may be callables receiving the
    wrapped function's arguments.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not get_timing_logger().enabled:
                return func(*args, **kwargs)
            with time_block(
                section,
                run_index=_resolve(run_index, args, kwargs),
                generation=_resolve(generation, args, kwargs),
                extra=_resolve(extra, args, kwargs),
            ):
                return func(*args, **kwargs)

        return wrapper

    return decorator
