"""
Funciones pseudo-booleanas de referencia (maximizacion, optimo = n).

La instancia 1 es la funcion original; una instancia i > 1 aplica XOR con
una mascara aleatoria generada con la semilla i, lo que desplaza el optimo
sin cambiar la dificultad.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Sequence, Type

import numpy as np

from ..core.config import ConfigurationError
from ..core.population import CANDIDATE_DTYPE, as_candidate


class PseudoBooleanProblem(ABC):
    problem_id: int = 0
    name: str = "problem"

    def __init__(self, dimension: int, instance_id: int = 1) -> None:
        if dimension < 1:
            raise ValueError(f"Problem dimension must be positive, got {dimension}.")
        if instance_id < 1:
            raise ValueError(f"Instance id must be >= 1, got {instance_id}.")
        self.n = int(dimension)
        self.instance_id = int(instance_id)
        if self.instance_id == 1:
            self.mask = np.zeros(self.n, dtype=CANDIDATE_DTYPE)
        else:
            self.mask = np.random.default_rng(self.instance_id).integers(
                0, 2, size=self.n, dtype=CANDIDATE_DTYPE
            )
        self.evaluations = 0
        self.best_so_far = -float("inf")
        self._hit = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.n}, instance={self.instance_id})"

    @abstractmethod
    def raw_value(self, z: np.ndarray) -> float:
        raise NotImplementedError

    def evaluate(self, candidate: Sequence[int]) -> float:
        x = as_candidate(candidate)
        if x.shape != (self.n,):
            raise ValueError(f"Candidate length {x.shape[0]} does not match dimension {self.n}.")
        y = float(self.raw_value(np.bitwise_xor(x, self.mask)))
        self.evaluations += 1
        if y > self.best_so_far:
            self.best_so_far = y
        if y >= self.optimal_value():
            self._hit = True
        return y

    def reset(self) -> None:
        self.evaluations = 0
        self.best_so_far = -float("inf")
        self._hit = False

    def dimension(self) -> int:
        return self.n

    def hit_optimal(self) -> bool:
        return self._hit

    def optimal_value(self) -> float:
        return float(self.n)


class OneMax(PseudoBooleanProblem):
    problem_id = 1
    name = "OneMax"

    def raw_value(self, z: np.ndarray) -> float:
        return float(np.count_nonzero(z))


class LeadingOnes(PseudoBooleanProblem):
    problem_id = 2
    name = "LeadingOnes"

    def raw_value(self, z: np.ndarray) -> float:
        zeros = np.flatnonzero(z == 0)
        return float(zeros[0]) if zeros.size else float(self.n)


PROBLEMS: Dict[int, Type[PseudoBooleanProblem]] = {
    OneMax.problem_id: OneMax,
    LeadingOnes.problem_id: LeadingOnes,
}


def make_problem(problem_id: int, instance_id: int, dimension: int) -> PseudoBooleanProblem:
    try:
        cls = PROBLEMS[int(problem_id)]
    except KeyError:
        valid = ", ".join(f"{pid}={cls.name}" for pid, cls in PROBLEMS.items())
        raise ConfigurationError(f"Unknown problem id {problem_id}; available: {valid}.") from None
    return cls(dimension, instance_id)
