"""
(1+lambda)-EA>0 con autoadaptacion de la tasa de mutacion en dos tasas.

En cada generacion la mitad de los descendientes muta con tasa r/(2n) y la
otra mitad con 2r/n. Tras la seleccion, con probabilidad 1/2 r pasa a ser
la tasa con la que se genero el mejor descendiente; en otro caso r se
divide o se multiplica por 2 al azar. r se mantiene en [2, n/4].
"""

from __future__ import annotations

import dataclasses
from typing import List, Optional, Tuple

import numpy as np

from ..core.config import Config
from .engine import EvolutionEngine


class TwoRateEA(EvolutionEngine):
    LOWER_RATE = 2.0

    def __init__(
        self,
        cfg: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        lam: int = 10,
        initial_rate: float = 2.0,
        **kwargs,
    ) -> None:
        if lam < 2:
            raise ValueError(f"Two-rate EA needs lambda >= 2, got {lam}.")
        base = cfg or Config()
        cfg = dataclasses.replace(
            base,
            mu=1,
            lam=int(lam),
            crossover_probability=0.0,
            crossover_mutation_relation="OR",
            mutation="BINOMIALSAMPLE",
            selection="BESTPLUS",
            mutation_rate_scale=None,
        )
        super().__init__(cfg, rng, **kwargs)
        self.initial_rate = float(initial_rate)
        self.rate = self.initial_rate
        self.rate_trace: List[float] = []
        # Tasa r con la que se genero cada descendiente de la generacion en curso.
        self.child_rates: List[float] = []

    def upper_rate(self) -> float:
        return max(self.LOWER_RATE, self.dimension / 4.0)

    def clamp(self, r: float) -> float:
        return min(max(r, self.LOWER_RATE), self.upper_rate())

    def prepare(self) -> None:
        super().prepare()
        self.rate = self.clamp(self.initial_rate)
        self.rate_trace = []
        self.child_rates = []

    def rate_for(self, index: int) -> float:
        return self.rate / 2.0 if index < self.lam // 2 else self.rate * 2.0

    def breed(self, first: int, second: int) -> Tuple[np.ndarray, float]:
        index = len(self.offspring)
        if index == 0:
            self.child_rates = []
        r = self.rate_for(index)
        self.child_rates.append(r)
        self.mutation.set_rate(min(r / self.dimension, 1.0))
        return super().breed(first, second)

    def adaptive_strategy(self) -> None:
        fitness = self.offspring.fitness
        best_value = min(fitness, key=self.direction.sort_key)
        winners = [i for i, y in enumerate(fitness) if y == best_value]
        winner = winners[int(self.rng.integers(len(winners)))]
        if self.rng.random() < 0.5:
            proposal = self.child_rates[winner]
        elif self.rng.random() < 0.5:
            proposal = self.rate / 2.0
        else:
            proposal = self.rate * 2.0
        self.rate = self.clamp(proposal)
        self.rate_trace.append(self.rate)
        if self.logger:
            self.logger.debug(
                "Generation %d | winner rate=%.3f | r=%.3f",
                self.run_state.generation,
                self.child_rates[winner],
                self.rate,
            )


if __name__ == "__main__":
    from ..problems.benchmarks import OneMax

    algo = TwoRateEA(Config(eval_budget=3000, seed=7))
    state = algo.run(OneMax(64))
    print("Evaluaciones:", state.evaluations, "| r final:", round(algo.rate, 3))
