"""
Poblacion: candidatos binarios de longitud fija con su vector de fitness paralelo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

CANDIDATE_DTYPE = np.int8


def as_candidate(bits: Iterable[int]) -> np.ndarray:
    """Convierte cualquier secuencia 0/1 en un vector binario contiguo."""
    if isinstance(bits, np.ndarray):
        return bits.astype(CANDIDATE_DTYPE, copy=True)
    return np.array(list(bits), dtype=CANDIDATE_DTYPE)


@dataclass
class Population:
    dimension: int
    candidates: List[np.ndarray] = field(default_factory=list)
    fitness: List[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.candidates) != len(self.fitness):
            raise ValueError(
                f"Population has {len(self.candidates)} candidates but "
                f"{len(self.fitness)} fitness values."
            )
        self.candidates = [self._checked(c) for c in self.candidates]
        self.fitness = [float(f) for f in self.fitness]

    def _checked(self, candidate: Sequence[int]) -> np.ndarray:
        arr = np.asarray(candidate, dtype=CANDIDATE_DTYPE)
        if arr.shape != (self.dimension,):
            raise ValueError(
                f"Candidate length {arr.shape} does not match dimension {self.dimension}."
            )
        return arr

    def add(self, candidate: Sequence[int], fitness: float) -> None:
        self.candidates.append(self._checked(candidate).copy())
        self.fitness.append(float(fitness))

    def clear(self) -> None:
        self.candidates.clear()
        self.fitness.clear()

    def __len__(self) -> int:
        return len(self.candidates)

    def __getitem__(self, idx: int) -> Tuple[np.ndarray, float]:
        return self.candidates[idx], self.fitness[idx]

    def __iter__(self) -> Iterator[Tuple[np.ndarray, float]]:
        return iter(zip(self.candidates, self.fitness))

    def fitness_array(self) -> np.ndarray:
        return np.asarray(self.fitness, dtype=float)

    def merged(self, other: "Population") -> "Population":
        if other.dimension != self.dimension:
            raise ValueError(
                f"Cannot merge populations of dimension {self.dimension} and {other.dimension}."
            )
        return Population(
            self.dimension,
            [c.copy() for c in self.candidates] + [c.copy() for c in other.candidates],
            list(self.fitness) + list(other.fitness),
        )

    def subset(self, indices: Iterable[int]) -> "Population":
        idx = [int(i) for i in indices]
        return Population(
            self.dimension,
            [self.candidates[i].copy() for i in idx],
            [self.fitness[i] for i in idx],
        )

    def replace_with(self, other: "Population") -> None:
        """Sustituye el contenido in situ (los llamadores conservan la referencia)."""
        self.candidates = [c.copy() for c in other.candidates]
        self.fitness = list(other.fitness)

    def require_size(self, expected: int, label: str = "population") -> None:
        if len(self) != expected:
            raise ValueError(f"{label} size is {len(self)}, expected {expected}.")
