"""
Estrategias de seleccion de supervivientes (mu + lambda) y (mu, lambda).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..core.config import ConfigurationError, Direction, OperatorConfiguration, SelectionKind
from ..core.population import Population


class SelectionStrategy(ABC):
    """
    Reduce el conjunto de padres y descendientes a la siguiente generacion.

    Las variantes "plus" seleccionan de la union padres + hijos (en ese
    orden); las variantes "comma" solo de los hijos.
    """

    kind: SelectionKind

    def __init__(
        self,
        rng: np.random.Generator,
        mu: int,
        direction: Direction = Direction.MAXIMIZATION,
        plus: bool = True,
    ) -> None:
        self.rng = rng
        self.mu = int(mu)
        self.direction = direction
        self.plus = plus

    def pool(self, parents: Population, offspring: Population) -> Population:
        return parents.merged(offspring) if self.plus else offspring

    def select(self, parents: Population, offspring: Population) -> Population:
        pool = self.pool(parents, offspring)
        if len(pool) < 1:
            raise ValueError("Selection pool is empty.")
        chosen = self.choose(pool)
        result = pool.subset(chosen)
        result.require_size(self.mu, "selected parent population")
        return result

    def ranked(self, fitness: np.ndarray) -> List[int]:
        return sorted(range(len(fitness)), key=lambda i: self.direction.sort_key(fitness[i]))

    @abstractmethod
    def choose(self, pool: Population) -> List[int]:
        raise NotImplementedError


class BestSelection(SelectionStrategy):
    def __init__(self, rng, mu, direction=Direction.MAXIMIZATION, plus=True) -> None:
        super().__init__(rng, mu, direction, plus)
        self.kind = SelectionKind.BESTPLUS if plus else SelectionKind.BESTCOMMA

    def choose(self, pool: Population) -> List[int]:
        if len(pool) < self.mu:
            raise ConfigurationError(
                f"{self.kind.name} needs at least mu={self.mu} candidates, got {len(pool)}."
            )
        return self.ranked(pool.fitness_array())[: self.mu]


class TournamentSelection(SelectionStrategy):
    def __init__(
        self, rng, mu, direction=Direction.MAXIMIZATION, plus=True, tournament_k: int = 2
    ) -> None:
        super().__init__(rng, mu, direction, plus)
        self.kind = SelectionKind.TOURNAMENTPLUS if plus else SelectionKind.TOURNAMENTCOMMA
        self.tournament_k = int(tournament_k)

    def choose(self, pool: Population) -> List[int]:
        size = len(pool)
        if not 1 <= self.tournament_k <= size:
            raise ConfigurationError(
                f"Tournament size {self.tournament_k} exceeds the selectable pool of {size}."
            )
        fitness = pool.fitness_array()
        winners: List[int] = []
        for _ in range(self.mu):
            contestants = self.rng.integers(0, size, size=self.tournament_k)
            best = int(contestants[0])
            for cand in contestants[1:]:
                if self.direction.is_better(fitness[cand], fitness[best]):
                    best = int(cand)
            winners.append(best)
        return winners


class ProportionalSelection(SelectionStrategy):
    def __init__(self, rng, mu, direction=Direction.MAXIMIZATION, plus=True) -> None:
        super().__init__(rng, mu, direction, plus)
        self.kind = SelectionKind.PROPORTIONALPLUS if plus else SelectionKind.PROPORTIONALCOMMA

    def weights(self, fitness: np.ndarray) -> np.ndarray:
        if self.direction is Direction.MAXIMIZATION:
            shifted = fitness - fitness.min()
        else:
            shifted = fitness.max() - fitness
        total = shifted.sum()
        if not np.isfinite(total) or total <= 0.0:
            return np.full(fitness.shape[0], 1.0 / fitness.shape[0])
        return shifted / total

    def choose(self, pool: Population) -> List[int]:
        probs = self.weights(pool.fitness_array())
        picks = self.rng.choice(len(pool), size=self.mu, replace=True, p=probs)
        return [int(i) for i in picks]


def build_selection(
    ops: OperatorConfiguration,
    rng: np.random.Generator,
    mu: int,
    direction: Direction = Direction.MAXIMIZATION,
) -> SelectionStrategy:
    kind = ops.selection
    plus = not kind.is_comma
    if kind in (SelectionKind.BESTPLUS, SelectionKind.BESTCOMMA):
        return BestSelection(rng, mu, direction, plus)
    if kind in (SelectionKind.TOURNAMENTPLUS, SelectionKind.TOURNAMENTCOMMA):
        return TournamentSelection(rng, mu, direction, plus, tournament_k=ops.tournament_k)
    if kind in (SelectionKind.PROPORTIONALPLUS, SelectionKind.PROPORTIONALCOMMA):
        return ProportionalSelection(rng, mu, direction, plus)
    raise ConfigurationError(f"Unknown selection operator {kind!r}.")


if __name__ == "__main__":
    rng = np.random.default_rng(0)
    parents = Population(2, [[0, 0], [0, 1]], [5.0, 3.0])
    offspring = Population(2, [[1, 0], [1, 1]], [4.0, 6.0])
    survivors = BestSelection(rng, mu=2).select(parents, offspring)
    print("Fitness de supervivientes:", survivors.fitness)
