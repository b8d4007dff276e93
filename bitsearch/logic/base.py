"""
Contabilidad comun a todos los algoritmos de busqueda: estado de la
ejecucion, presupuestos, evaluacion instrumentada y ejecuciones repetidas.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import numpy as np

from ..core.config import Config, make_rng
from ..core.interfaces import EvaluationRecord, Problem, Suite, TrajectoryLogger
from ..core.telemetry import LOGGER_NAME


class EngineState(enum.Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    INITIALIZING = "initializing"
    GENERATING = "generating"
    TERMINATED = "terminated"


@dataclass
class RunState:
    """Contadores y mejor solucion de una ejecucion independiente."""

    evaluations: int = 0
    generation: int = 0
    best_fitness: float = -float("inf")
    best_individual: Optional[np.ndarray] = None
    optimum_found: bool = False
    hitting_time: Optional[int] = None
    # Puntos (evaluaciones, mejor valor) en los que mejora el mejor encontrado.
    history: List[Tuple[int, float]] = field(default_factory=list)


class SearchAlgorithm:
    def __init__(
        self,
        cfg: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        *,
        trajectory_logger: Optional[TrajectoryLogger] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cfg = cfg or Config()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.rng = rng if rng is not None else make_rng(self.cfg.seed)
        self.direction = self.cfg.direction
        self.problem: Optional[Problem] = None
        self.trajectory_logger = trajectory_logger
        self.state = EngineState.IDLE
        self.run_state = RunState()
        self.run_index = 0
        self.dimension = 0

    def assign_problem(self, problem: Problem) -> None:
        self.problem = problem

    def assign_logger(self, trajectory_logger: Optional[TrajectoryLogger]) -> None:
        self.trajectory_logger = trajectory_logger

    def start_problem(self) -> None:
        """Reinicia el problema y los contadores antes de una ejecucion."""
        if self.problem is None:
            raise ValueError("No problem assigned to the engine.")
        self.state = EngineState.PREPARING
        self.problem.reset()
        if self.trajectory_logger is not None:
            self.trajectory_logger.track_problem(self.problem)
        self.dimension = int(self.problem.dimension())
        if self.dimension < 1:
            raise ValueError(f"Problem dimension must be positive, got {self.dimension}.")
        self.run_state = RunState(best_fitness=self.direction.worst())

    def termination(self) -> bool:
        rs = self.run_state
        return (
            rs.optimum_found
            or rs.evaluations >= self.cfg.eval_budget
            or rs.generation > self.cfg.generation_budget
        )

    def evaluate(self, x: np.ndarray) -> float:
        if x.shape[0] != self.dimension:
            raise ValueError(
                f"Candidate length {x.shape[0]} does not match problem dimension {self.dimension}."
            )
        y = float(self.problem.evaluate(x))
        rs = self.run_state
        rs.evaluations += 1
        rs.optimum_found = bool(self.problem.hit_optimal())
        if self.direction.is_better(y, rs.best_fitness):
            rs.best_fitness = y
            rs.best_individual = x.copy()
            rs.history.append((rs.evaluations, y))
        target = self.cfg.hitting_target
        if (
            target is not None
            and rs.hitting_time is None
            and self.direction.is_at_least(rs.best_fitness, target)
        ):
            rs.hitting_time = rs.evaluations
        if self.trajectory_logger is not None:
            self.trajectory_logger.do_log(
                EvaluationRecord(rs.evaluations, y, rs.best_fitness, rs.generation)
            )
        return y

    def run(self, problem: Optional[Problem] = None) -> RunState:
        raise NotImplementedError

    def run_n(self, problem: Optional[Problem] = None, runs: Optional[int] = None) -> List[RunState]:
        """Ejecuciones independientes secuenciales sobre el mismo flujo aleatorio."""
        total = self.cfg.independent_runs if runs is None else int(runs)
        return [self.run(problem) for _ in range(total)]

    def run_suite(self, suite: Suite, runs: Optional[int] = None) -> List[Tuple[Any, RunState]]:
        results: List[Tuple[Any, RunState]] = []
        problem = suite.next_problem()
        while problem is not None:
            self.run_index = 0
            for state in self.run_n(problem, runs):
                results.append((problem, state))
            problem = suite.next_problem()
        return results
