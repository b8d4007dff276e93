"""
Configuracion base, resolucion de operadores y utilidades de seeding.
"""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import Optional

import numpy as np


class ConfigurationError(ValueError):
    """Error fatal de configuracion: nunca se corrige con un valor por defecto."""


class _NamedKind(enum.Enum):
    @classmethod
    def parse(cls, raw: "str | _NamedKind") -> "_NamedKind":
        if isinstance(raw, cls):
            return raw
        key = str(raw).strip().upper()
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ConfigurationError(
                f"Unknown {cls.__name__} '{raw}'; valid options: {valid}."
            ) from None


class CrossoverKind(_NamedKind):
    UNIFORMCROSSOVER = 1
    ONEPOINTCROSSOVER = 2
    TWOPOINTCROSSOVER = 3


class MutationKind(_NamedKind):
    STATICSAMPLE = 1
    BINOMIALSAMPLE = 2
    NORMALSAMPLE = 3
    LOGNORMALSAMPLE = 4
    POWERLAWSAMPLE = 5


class SelectionKind(_NamedKind):
    BESTPLUS = 1
    BESTCOMMA = 2
    TOURNAMENTPLUS = 3
    TOURNAMENTCOMMA = 4
    PROPORTIONALPLUS = 5
    PROPORTIONALCOMMA = 6

    @property
    def is_comma(self) -> bool:
        return self.name.endswith("COMMA")


class CrossoverMutationRelation(_NamedKind):
    # IND: mutacion siempre, cruce con probabilidad p_c.
    # OR: cruce con probabilidad p_c, si no mutacion.
    IND = 1
    OR = 0


class Direction(enum.Enum):
    MAXIMIZATION = 1
    MINIMIZATION = -1

    def is_better(self, a: float, b: float) -> bool:
        return a > b if self is Direction.MAXIMIZATION else a < b

    def is_at_least(self, a: float, b: float) -> bool:
        return a >= b if self is Direction.MAXIMIZATION else a <= b

    def worst(self) -> float:
        return -float("inf") if self is Direction.MAXIMIZATION else float("inf")

    def sort_key(self, value: float) -> float:
        """Clave ascendente: el mejor valor queda primero."""
        return -value if self is Direction.MAXIMIZATION else value


@dataclass(frozen=True)
class OperatorConfiguration:
    """Variantes resueltas y parametros numericos de los operadores."""

    crossover: CrossoverKind = CrossoverKind.UNIFORMCROSSOVER
    mutation: MutationKind = MutationKind.BINOMIALSAMPLE
    selection: SelectionKind = SelectionKind.BESTPLUS
    relation: CrossoverMutationRelation = CrossoverMutationRelation.OR
    crossover_probability: float = 0.0
    p_u: float = 0.5
    mutation_strength: int = 1
    mutation_rate: float = 0.01
    normal_mean: float = 1.0
    normal_sd: float = 0.01
    power_law_beta: float = 1.5
    tournament_k: int = 2

    def validate(self, mu: int, lam: int) -> None:
        """
        Comprueba las combinaciones invalidas antes de iniciar una ejecucion.
        """
        if mu < 1 or lam < 1:
            raise ConfigurationError(f"mu and lambda must be >= 1 (mu={mu}, lambda={lam}).")
        if not 0.0 <= self.crossover_probability <= 1.0:
            raise ConfigurationError(
                f"crossover probability {self.crossover_probability} outside [0, 1]."
            )
        if not 0.0 <= self.p_u <= 1.0:
            raise ConfigurationError(f"uniform crossover p_u {self.p_u} outside [0, 1].")
        if self.mutation is MutationKind.STATICSAMPLE and self.mutation_strength < 1:
            raise ConfigurationError(
                f"static mutation strength must be >= 1, got {self.mutation_strength}."
            )
        if self.mutation is MutationKind.POWERLAWSAMPLE and self.power_law_beta <= 0.0:
            raise ConfigurationError(
                f"power-law beta must be positive, got {self.power_law_beta}."
            )
        if self.selection.is_comma and mu > lam:
            raise ConfigurationError(
                f"mu ({mu}) > lambda ({lam}) with {self.selection.name} selection."
            )
        if self.selection in (SelectionKind.TOURNAMENTPLUS, SelectionKind.TOURNAMENTCOMMA):
            pool = lam if self.selection.is_comma else mu + lam
            if self.tournament_k < 1 or self.tournament_k > pool:
                raise ConfigurationError(
                    f"tournament size {self.tournament_k} not in [1, {pool}] "
                    f"for {self.selection.name} selection."
                )


@dataclass
class Config:
    """
    Parametros de poblacion, operadores, presupuestos y salida.

    Los nombres categoricos se resuelven en `operators()`; un nombre
    desconocido aborta con `ConfigurationError`.
    """

    # Poblacion
    mu: int = 1
    lam: int = 1

    # Operadores
    crossover_probability: float = 0.0
    crossover_mutation_relation: str = "OR"  # "IND" | "OR"
    crossover: str = "UNIFORMCROSSOVER"
    p_u: float = 0.5
    mutation: str = "BINOMIALSAMPLE"
    mutation_strength: int = 1
    mutation_rate: float = 0.01
    # Si se define, la tasa de mutacion se deriva como scale / n en cada ejecucion.
    mutation_rate_scale: Optional[float] = None
    normal_mean: float = 1.0
    normal_sd: float = 0.01
    power_law_beta: float = 1.5
    selection: str = "BESTPLUS"
    tournament_k: int = 2

    # Presupuestos
    eval_budget: int = 10000
    generation_budget: int = sys.maxsize
    independent_runs: int = 1
    seed: int = 42

    # Objetivo
    maximize: bool = True
    hitting_target: Optional[float] = None

    # I/O
    artifacts_dir: str = "artifacts"
    save_plots: bool = False
    headless: bool = True
    log_level: str = "INFO"

    @property
    def direction(self) -> Direction:
        return Direction.MAXIMIZATION if self.maximize else Direction.MINIMIZATION

    def operators(self) -> OperatorConfiguration:
        return OperatorConfiguration(
            crossover=CrossoverKind.parse(self.crossover),
            mutation=MutationKind.parse(self.mutation),
            selection=SelectionKind.parse(self.selection),
            relation=CrossoverMutationRelation.parse(self.crossover_mutation_relation),
            crossover_probability=float(self.crossover_probability),
            p_u=float(self.p_u),
            mutation_strength=int(self.mutation_strength),
            mutation_rate=float(self.mutation_rate),
            normal_mean=float(self.normal_mean),
            normal_sd=float(self.normal_sd),
            power_law_beta=float(self.power_law_beta),
            tournament_k=int(self.tournament_k),
        )


def make_rng(seed: Optional[int]) -> np.random.Generator:
    """Crea el flujo pseudoaleatorio compartido por motor y operadores."""
    return np.random.default_rng(seed)


if __name__ == "__main__":
    cfg = Config()
    print("Config de prueba:", cfg)
    print("Operadores:", cfg.operators())
