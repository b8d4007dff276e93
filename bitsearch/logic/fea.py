"""
Busqueda de trayectoria unica (1+1) con reglas de aceptacion intercambiables.

El (1+1)-FEA acepta el nuevo candidato cuando el valor objetivo que produce
se ha visto con menor o igual frecuencia que el del candidato actual. Solo
importan las frecuencias relativas, por lo que la busqueda es invariante a
cualquier transformacion estrictamente monotona del objetivo.

La variante elitista (1+1)-EA>0 comparte el mismo bucle y acepta cuando el
nuevo valor es al menos tan bueno como el actual.

El recocido simulado acepta ademas un empeoramiento dE con probabilidad
exp(-dE / T), con temperatura exponencial T(k) = T0 (1 - eps)^(k - 1). La
configuracion es automatica a partir de n y del presupuesto:

- T0 hace que un empeoramiento de max(1, n/4) se acepte con probabilidad 0.1.
- Al agotar el presupuesto B, un empeoramiento de 1 se acepta con
  probabilidad 1/sqrt(B).
- eps se deriva de ambas temperaturas.

Con reinicios, cada ejecucion interna parte de una solucion aleatoria nueva
y dispone del doble de evaluaciones que la anterior, empezando en 1024.
"""

from __future__ import annotations

import copy
import logging
import math
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Optional

import numpy as np

from ..core.config import Config, ConfigurationError
from ..core.interfaces import Problem, TrajectoryLogger
from ..core.population import CANDIDATE_DTYPE
from ..perf_timings.timers import time_block, time_section
from .base import EngineState, RunState, SearchAlgorithm

ACCEPTANCE_RULES = ("frequency", "elitist", "annealing")
FIRST_RESTART_BUDGET = 1024


class FrequencyTable:
    """Numero de veces que se ha encontrado cada valor objetivo exacto."""

    def __init__(self) -> None:
        self.counts: DefaultDict[float, int] = defaultdict(int)

    def __len__(self) -> int:
        return len(self.counts)

    def __getitem__(self, value: float) -> int:
        return self.counts.get(value, 0)

    def seed(self, value: float) -> None:
        self.counts.setdefault(value, 0)

    def observe(self, current: float, new: float) -> bool:
        """Registra un encuentro de ambos valores; True si se acepta `new`."""
        self.counts.setdefault(new, 0)
        self.counts[current] += 1
        self.counts[new] += 1
        return self.counts[new] <= self.counts[current]

    def clear(self) -> None:
        self.counts.clear()


def temperature_for(delta: float, probability: float) -> float:
    """Temperatura a la que un empeoramiento `delta` se acepta con `probability`."""
    if not math.isfinite(delta) or delta <= 0.0:
        raise ConfigurationError(f"Energy difference must be positive and finite, got {delta}.")
    if not math.isfinite(probability) or not 0.0 < probability < 1.0:
        raise ConfigurationError(f"Acceptance probability must be in (0, 1), got {probability}.")
    return -delta / math.log(probability)


@dataclass(frozen=True)
class AnnealingSchedule:
    t_start: float
    t_end: float
    epsilon: float

    @classmethod
    def auto(cls, dimension: int, budget: int) -> "AnnealingSchedule":
        if budget <= 1:
            raise ConfigurationError(f"Annealing budget must be > 1, got {budget}.")
        if dimension < 1:
            raise ConfigurationError(f"Dimension must be positive, got {dimension}.")
        t_start = temperature_for(max(1.0, dimension / 4.0), 0.1)
        if not math.isfinite(t_start) or t_start < 1.0:
            raise ConfigurationError(
                f"Start temperature {t_start:.4g} < 1 for n={dimension}; annealing needs n >= 10."
            )
        t_end = temperature_for(1.0, 1.0 / math.sqrt(budget))
        if not math.isfinite(t_end) or t_end >= t_start:
            raise ConfigurationError(
                f"End temperature {t_end:.4g} must be below start temperature {t_start:.4g}."
            )
        epsilon = 1.0 - (t_end / t_start) ** (1.0 / (budget - 1))
        if not math.isfinite(epsilon) or not 0.0 < epsilon < 1.0:
            raise ConfigurationError(f"Temperature decay {epsilon} outside (0, 1).")
        return cls(t_start, t_end, epsilon)

    def temperature(self, step: int) -> float:
        """Temperatura en el paso `step` >= 1 de una ejecucion."""
        return self.t_start * (1.0 - self.epsilon) ** (step - 1)


class FrequencyFitnessEA(SearchAlgorithm):
    def __init__(
        self,
        cfg: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        *,
        acceptance: str = "frequency",
        restarts: bool = False,
        trajectory_logger: Optional[TrajectoryLogger] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if acceptance not in ACCEPTANCE_RULES:
            raise ConfigurationError(
                f"Unknown acceptance rule '{acceptance}'; valid options: {', '.join(ACCEPTANCE_RULES)}."
            )
        if restarts and acceptance != "annealing":
            raise ConfigurationError("Restarts are only available with annealing acceptance.")
        super().__init__(cfg, rng, trajectory_logger=trajectory_logger, logger=logger)
        self.acceptance = acceptance
        self.restarts = restarts
        self.table = FrequencyTable()
        self.schedule: Optional[AnnealingSchedule] = None
        self.current: Optional[np.ndarray] = None
        self.current_y = 0.0
        # Paso dentro de la ejecucion interna actual; la solucion inicial es el paso 1.
        self.step = 0
        self.inner_budget = 0
        self.restart_count = 0

    def neighbour(self, x: np.ndarray) -> np.ndarray:
        """Voltea cada bit con probabilidad 1/n, repitiendo hasta cambiar alguno."""
        n = x.shape[0]
        mask = self.rng.random(n) < 1.0 / n
        while not mask.any():
            mask = self.rng.random(n) < 1.0 / n
        y = x.copy()
        y[mask] = 1 - y[mask]
        return y

    def accepts(self, y_new: float) -> bool:
        if self.acceptance == "frequency":
            return self.table.observe(self.current_y, y_new)
        if self.direction.is_at_least(y_new, self.current_y):
            return True
        if self.acceptance == "elitist":
            return False
        delta = abs(self.current_y - y_new)
        temperature = self.schedule.temperature(self.step)
        return bool(self.rng.random() < math.exp(-delta / temperature))

    def start_trajectory(self) -> None:
        """Solucion inicial aleatoria y, para el recocido, su calendario."""
        if self.acceptance == "annealing":
            self.schedule = AnnealingSchedule.auto(self.dimension, self.inner_budget)
        self.current = (self.rng.random(self.dimension) < 0.5).astype(CANDIDATE_DTYPE)
        self.current_y = self.evaluate(self.current)
        self.step = 1
        if self.acceptance == "frequency":
            self.table.seed(self.current_y)

    @time_section("run", run_index=lambda self, *args, **kwargs: self.run_index)
    def run(self, problem: Optional[Problem] = None) -> RunState:
        if problem is not None:
            self.assign_problem(problem)
        started = time.time()
        self.start_problem()
        self.table.clear()
        self.restart_count = 0
        self.inner_budget = FIRST_RESTART_BUDGET if self.restarts else self.cfg.eval_budget
        if self.logger:
            self.logger.info(
                "Run %d started | %s acceptance | problem=%s | n=%d | eval_budget=%d",
                self.run_index,
                self.acceptance,
                getattr(self.problem, "name", "?"),
                self.dimension,
                self.cfg.eval_budget,
            )

        self.state = EngineState.INITIALIZING
        with time_block("initialization", run_index=self.run_index):
            self.start_trajectory()
        if self.schedule is not None and self.logger:
            self.logger.debug(
                "Annealing schedule | T0=%.4g | Tend=%.4g | epsilon=%.4g",
                self.schedule.t_start,
                self.schedule.t_end,
                self.schedule.epsilon,
            )

        self.state = EngineState.GENERATING
        rs = self.run_state
        while not self.termination():
            rs.generation += 1
            if self.restarts and self.step >= self.inner_budget:
                self.inner_budget *= 2
                self.restart_count += 1
                self.start_trajectory()
                continue
            candidate = self.neighbour(self.current)
            self.step += 1
            y_new = self.evaluate(candidate)
            if self.accepts(y_new):
                self.current, self.current_y = candidate, y_new

        self.state = EngineState.TERMINATED
        if self.logger:
            self.logger.info(
                "Run %d finished | %s acceptance | problem=%s | evals=%d | best=%.6g | distinct values=%d | restarts=%d | wall=%.2fs",
                self.run_index,
                self.acceptance,
                getattr(self.problem, "name", "?"),
                rs.evaluations,
                rs.best_fitness,
                len(self.table),
                self.restart_count,
                time.time() - started,
            )
        self.run_index += 1
        return copy.deepcopy(rs)


if __name__ == "__main__":
    from ..problems.benchmarks import LeadingOnes

    fea = FrequencyFitnessEA(Config(eval_budget=5000, seed=11))
    print("FEA sobre LeadingOnes:", fea.run(LeadingOnes(32)).best_fitness)
    sa = FrequencyFitnessEA(Config(eval_budget=5000, seed=11), acceptance="annealing")
    print("Recocido sobre LeadingOnes:", sa.run(LeadingOnes(32)).best_fitness)
