"""
Contratos de los colaboradores externos: problema, logger de trayectoria y suite.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class EvaluationRecord:
    """Fila que el motor entrega al logger tras cada evaluacion."""

    evaluations: int
    raw_y: float
    best_so_far_y: float
    generation: int = 0


@runtime_checkable
class Problem(Protocol):
    problem_id: int
    instance_id: int
    name: str

    def evaluate(self, candidate: Sequence[int]) -> float: ...

    def reset(self) -> None: ...

    def dimension(self) -> int: ...

    def hit_optimal(self) -> bool: ...

    def optimal_value(self) -> float: ...


@runtime_checkable
class TrajectoryLogger(Protocol):
    def activate(self) -> None: ...

    def track_problem(self, problem: Problem) -> None: ...

    def do_log(self, record: EvaluationRecord) -> None: ...

    def clear(self) -> None: ...


class Suite(Protocol):
    def next_problem(self) -> Optional[Problem]: ...
