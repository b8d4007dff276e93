"""
Operadores de cruce para candidatos binarios.

Cada operador devuelve un unico hijo y el conjunto ordenado de posiciones en
las que el hijo difiere del primer padre.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from ..core.config import ConfigurationError, CrossoverKind
from ..core.population import CANDIDATE_DTYPE

FlipIndex = Tuple[int, ...]


def _check_parents(x1: Sequence[int], x2: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(x1, dtype=CANDIDATE_DTYPE)
    b = np.asarray(x2, dtype=CANDIDATE_DTYPE)
    if a.shape != b.shape or a.ndim != 1:
        raise ValueError(f"Crossover parents differ in length: {a.shape} vs {b.shape}.")
    return a, b


def _flipped(mask: np.ndarray, x1: np.ndarray, x2: np.ndarray) -> FlipIndex:
    return tuple(int(i) for i in np.flatnonzero(mask & (x1 != x2)))


class CrossoverStrategy(ABC):
    kind: CrossoverKind

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng
        self.flipped_index: FlipIndex = ()

    @abstractmethod
    def cross(self, x1: Sequence[int], x2: Sequence[int]) -> Tuple[np.ndarray, FlipIndex]:
        raise NotImplementedError


class UniformCrossover(CrossoverStrategy):
    kind = CrossoverKind.UNIFORMCROSSOVER

    def __init__(self, rng: np.random.Generator, p_u: float = 0.5) -> None:
        super().__init__(rng)
        self.p_u = float(p_u)

    def cross(self, x1: Sequence[int], x2: Sequence[int]) -> Tuple[np.ndarray, FlipIndex]:
        a, b = _check_parents(x1, x2)
        take_second = self.rng.random(a.shape[0]) < self.p_u
        child = np.where(take_second, b, a).astype(CANDIDATE_DTYPE)
        self.flipped_index = _flipped(take_second, a, b)
        return child, self.flipped_index


class OnePointCrossover(CrossoverStrategy):
    kind = CrossoverKind.ONEPOINTCROSSOVER

    def cross(
        self,
        x1: Sequence[int],
        x2: Sequence[int],
        point: Optional[int] = None,
    ) -> Tuple[np.ndarray, FlipIndex]:
        a, b = _check_parents(x1, x2)
        n = a.shape[0]
        if point is None:
            point = int(self.rng.random() * n)
        elif not 0 <= point < n:
            raise ValueError(f"Cut point {point} outside [0, {n}).")
        from_second = np.arange(n) >= point
        child = np.where(from_second, b, a).astype(CANDIDATE_DTYPE)
        self.flipped_index = _flipped(from_second, a, b)
        return child, self.flipped_index


class TwoPointCrossover(CrossoverStrategy):
    kind = CrossoverKind.TWOPOINTCROSSOVER

    def draw_points(self, n: int) -> Tuple[int, int]:
        if n < 2:
            raise ValueError("Two-point crossover needs candidates of length >= 2.")
        first = int(self.rng.random() * n)
        second = int(self.rng.random() * n)
        while second == first:
            second = int(self.rng.random() * n)
        return (first, second) if first < second else (second, first)

    def cross(
        self,
        x1: Sequence[int],
        x2: Sequence[int],
        points: Optional[Tuple[int, int]] = None,
    ) -> Tuple[np.ndarray, FlipIndex]:
        a, b = _check_parents(x1, x2)
        n = a.shape[0]
        if points is None:
            lo, hi = self.draw_points(n)
        else:
            lo, hi = sorted(int(p) for p in points)
            if lo == hi or lo < 0 or hi >= n:
                raise ValueError(f"Cut points {points} must be distinct and inside [0, {n}).")
        idx = np.arange(n)
        from_second = (idx >= lo) & (idx <= hi)
        child = np.where(from_second, b, a).astype(CANDIDATE_DTYPE)
        self.flipped_index = _flipped(from_second, a, b)
        return child, self.flipped_index


def build_crossover(
    kind: CrossoverKind, rng: np.random.Generator, p_u: float = 0.5
) -> CrossoverStrategy:
    if kind is CrossoverKind.UNIFORMCROSSOVER:
        return UniformCrossover(rng, p_u=p_u)
    if kind is CrossoverKind.ONEPOINTCROSSOVER:
        return OnePointCrossover(rng)
    if kind is CrossoverKind.TWOPOINTCROSSOVER:
        return TwoPointCrossover(rng)
    raise ConfigurationError(f"Unknown crossover operator {kind!r}.")


if __name__ == "__main__":
    rng = np.random.default_rng(1)
    op = UniformCrossover(rng, p_u=1.0)
    print("Hijo y posiciones cambiadas:", op.cross([0, 0, 0, 0], [1, 1, 1, 1]))
