"""
Operadores de mutacion por volteo de bits.

Todas las variantes comparten el mismo esquema: se muestrea una fuerza de
mutacion l (numero de bits a voltear) y se voltean l posiciones distintas
elegidas uniformemente. Las variantes solo difieren en como se muestrea l.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..core.config import ConfigurationError, MutationKind, OperatorConfiguration

FlipIndex = Tuple[int, ...]


class MutationStrategy(ABC):
    kind: MutationKind

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng
        self.dimension: Optional[int] = None
        self.flipped_index: FlipIndex = ()

    def prepare(self, dimension: int) -> None:
        """Deriva las constantes de la ejecucion a partir de la dimension."""
        if dimension < 1:
            raise ValueError(f"Dimension must be positive, got {dimension}.")
        self.dimension = int(dimension)

    @abstractmethod
    def sample_strength(self, n: int) -> int:
        raise NotImplementedError

    def flip(self, x: np.ndarray, strength: int) -> FlipIndex:
        n = x.shape[0]
        if not 0 <= strength <= n:
            raise ValueError(f"Cannot flip {strength} bits of a length-{n} candidate.")
        positions = np.sort(self.rng.choice(n, size=strength, replace=False))
        x[positions] = 1 - x[positions]
        self.flipped_index = tuple(int(i) for i in positions)
        return self.flipped_index

    def mutate(self, x: np.ndarray) -> FlipIndex:
        """Voltea bits de `x` in situ y devuelve las posiciones cambiadas."""
        if not isinstance(x, np.ndarray) or x.ndim != 1:
            raise TypeError("Mutation expects a one-dimensional numpy candidate.")
        n = x.shape[0]
        if self.dimension is None:
            self.prepare(n)
        elif n != self.dimension:
            raise ValueError(
                f"Candidate length {n} does not match prepared dimension {self.dimension}."
            )
        return self.flip(x, self.sample_strength(n))


class StaticStrength(MutationStrategy):
    kind = MutationKind.STATICSAMPLE

    def __init__(self, rng: np.random.Generator, strength: int = 1) -> None:
        super().__init__(rng)
        if strength < 1:
            raise ConfigurationError(f"Static mutation strength must be >= 1, got {strength}.")
        self.strength = int(strength)

    def sample_strength(self, n: int) -> int:
        return self.strength


class BinomialStrength(MutationStrategy):
    """
    Mutacion estandar de bits condicionada a cambiar al menos un bit.

    Muestrear l ~ Bin(n, p) repitiendo mientras l == 0 tiene la misma
    distribucion que repetir la mutacion bit a bit completa hasta que
    cambie algo.
    """

    kind = MutationKind.BINOMIALSAMPLE

    def __init__(self, rng: np.random.Generator, rate: float = 0.01) -> None:
        super().__init__(rng)
        self.rate = 0.0
        self.set_rate(rate)

    def set_rate(self, rate: float) -> None:
        if not 0.0 < rate <= 1.0:
            raise ConfigurationError(f"Mutation rate must be in (0, 1], got {rate}.")
        self.rate = float(rate)

    def sample_strength(self, n: int) -> int:
        strength = 0
        while strength == 0:
            strength = int(self.rng.binomial(n, self.rate))
        return strength


class NormalStrength(MutationStrategy):
    """
    l ~ N(mean, (sd * n)^2), redondeado y acotado a [1, n].

    Con `log_normal=True` se muestrea de la log-normal con la misma media y
    desviacion en escala lineal.
    """

    kind = MutationKind.NORMALSAMPLE

    def __init__(
        self,
        rng: np.random.Generator,
        mean: float = 1.0,
        sd: float = 0.01,
        log_normal: bool = False,
    ) -> None:
        super().__init__(rng)
        if mean <= 0.0 or sd < 0.0:
            raise ConfigurationError(
                f"Normalized mutation needs mean > 0 and sd >= 0 (mean={mean}, sd={sd})."
            )
        self.mean = float(mean)
        self.sd = float(sd)
        self.log_normal = bool(log_normal)
        if self.log_normal:
            self.kind = MutationKind.LOGNORMALSAMPLE

    def sample_strength(self, n: int) -> int:
        sigma = self.sd * n
        if self.log_normal:
            log_var = math.log1p((sigma / self.mean) ** 2)
            value = self.rng.lognormal(math.log(self.mean) - log_var / 2.0, math.sqrt(log_var))
        else:
            value = self.rng.normal(self.mean, sigma)
        return int(min(max(round(value), 1), n))


class PowerLawStrength(MutationStrategy):
    """Mutacion "rapida": l sigue una distribucion de cola pesada P(l) ~ l^-beta."""

    kind = MutationKind.POWERLAWSAMPLE

    def __init__(self, rng: np.random.Generator, beta: float = 1.5) -> None:
        super().__init__(rng)
        if beta <= 0.0:
            raise ConfigurationError(f"Power-law beta must be positive, got {beta}.")
        self.beta = float(beta)
        self.distribution: np.ndarray = np.empty(0)

    def prepare(self, dimension: int) -> None:
        super().prepare(dimension)
        self.distribution = power_law_distribution(self.dimension, self.beta)

    def sample_strength(self, n: int) -> int:
        if self.distribution.shape[0] != n:
            self.prepare(n)
        return int(self.rng.choice(n, p=self.distribution)) + 1


def power_law_distribution(n: int, beta: float) -> np.ndarray:
    """Tabla de probabilidades sobre l = 1..n con P(l) proporcional a l^-beta."""
    weights = np.arange(1, n + 1, dtype=float) ** (-beta)
    return weights / weights.sum()


def build_mutation(ops: OperatorConfiguration, rng: np.random.Generator) -> MutationStrategy:
    if ops.mutation is MutationKind.STATICSAMPLE:
        return StaticStrength(rng, ops.mutation_strength)
    if ops.mutation is MutationKind.BINOMIALSAMPLE:
        return BinomialStrength(rng, ops.mutation_rate)
    if ops.mutation is MutationKind.NORMALSAMPLE:
        return NormalStrength(rng, ops.normal_mean, ops.normal_sd)
    if ops.mutation is MutationKind.LOGNORMALSAMPLE:
        return NormalStrength(rng, ops.normal_mean, ops.normal_sd, log_normal=True)
    if ops.mutation is MutationKind.POWERLAWSAMPLE:
        return PowerLawStrength(rng, ops.power_law_beta)
    raise ConfigurationError(f"Unknown mutation operator {ops.mutation!r}.")


if __name__ == "__main__":
    rng = np.random.default_rng(3)
    op = PowerLawStrength(rng, beta=1.5)
    op.prepare(10)
    x = np.zeros(10, dtype=np.int8)
    print("Posiciones volteadas:", op.mutate(x), "->", x)
