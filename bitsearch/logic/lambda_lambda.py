"""
GA autoadaptativo (1+(lambda,lambda)).

Cada generacion tiene dos fases sobre un unico padre:

1. Mutacion: lambda mutantes independientes con tasa lambda/n.
2. Cruce: lambda hijos cruzando el padre con el mejor mutante, heredando
   cada bit del mutante con probabilidad 1/lambda.

El padre se sustituye por el mejor individuo de ambas fases y lambda se
ajusta con la regla 1/5: se reduce por b = 2/3 si hubo mejora estricta y
crece por a = 1.5^(1/4) en caso contrario, siempre dentro de [1, n].
"""

from __future__ import annotations

import dataclasses
from typing import List, Optional

import numpy as np

from ..core.config import Config
from ..core.population import Population
from ..perf_timings.timers import time_block
from .engine import EvolutionEngine


class OneLambdaLambdaEA(EvolutionEngine):
    GROWTH = 1.5 ** 0.25
    SHRINK = 2.0 / 3.0

    def __init__(
        self,
        cfg: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        initial_lambda: float = 1.0,
        **kwargs,
    ) -> None:
        if initial_lambda < 1:
            raise ValueError(f"Initial lambda must be >= 1, got {initial_lambda}.")
        base = cfg or Config()
        cfg = dataclasses.replace(
            base,
            mu=1,
            lam=max(1, int(round(initial_lambda))),
            crossover="UNIFORMCROSSOVER",
            mutation="BINOMIALSAMPLE",
            selection="BESTPLUS",
            crossover_probability=0.0,
            mutation_rate_scale=None,
        )
        super().__init__(cfg, rng, **kwargs)
        self.initial_lambda = float(initial_lambda)
        self.lambda_value = self.initial_lambda
        self.lambda_trace: List[float] = []
        self.best_fitness_seen = self.direction.worst()
        self._improved = False

    def offspring_count(self) -> int:
        return max(1, int(round(self.lambda_value)))

    def refresh_operators(self) -> None:
        self.mutation.set_rate(self.lambda_value / self.dimension)
        self.crossover.p_u = 1.0 / self.lambda_value

    def prepare(self) -> None:
        super().prepare()
        self.lambda_value = min(max(self.initial_lambda, 1.0), float(self.dimension))
        self.lambda_trace = []
        self.refresh_operators()

    def initialize(self) -> None:
        super().initialize()
        self.best_fitness_seen = self.parents.fitness[0]

    def _track(self, x: np.ndarray, y: float, best: list) -> None:
        # best = [candidato, fitness]; los empates desplazan al padre.
        if self.direction.is_at_least(y, best[1]):
            best[0] = x
            if self.direction.is_better(y, self.best_fitness_seen):
                self.best_fitness_seen = y
                self._improved = True
            best[1] = y

    def generation_step(self) -> bool:
        rs = self.run_state
        rs.generation += 1
        self._improved = False
        parent, parent_f = self.parents[0]
        best = [parent.copy(), parent_f]
        count = self.offspring_count()
        self.offspring.clear()

        with time_block(
            "generation",
            run_index=self.run_index,
            generation=rs.generation,
            extra={"lambda": round(self.lambda_value, 4)},
        ):
            mutant, mutant_f = None, self.direction.worst()
            for _ in range(count):
                x = parent.copy()
                self.mutation.mutate(x)
                y = self.evaluate(x)
                self.offspring.add(x, y)
                self._track(x, y, best)
                if mutant is None or self.direction.is_better(y, mutant_f):
                    mutant, mutant_f = x, y
                if self.termination():
                    return False

            for _ in range(count):
                child, flipped = self.crossover.cross(parent, mutant)
                if not flipped:
                    y = parent_f
                elif np.array_equal(child, mutant):
                    y = mutant_f
                else:
                    y = self.evaluate(child)
                self._track(child, y, best)
                if self.termination():
                    return False

        self.parents.replace_with(Population(self.dimension, [best[0]], [best[1]]))
        self.adaptive_strategy()
        return True

    def adaptive_strategy(self) -> None:
        self.adapt_lambda(self._improved)

    def adapt_lambda(self, improved: bool) -> None:
        if improved:
            self.lambda_value = max(self.lambda_value * self.SHRINK, 1.0)
        else:
            self.lambda_value = min(self.lambda_value * self.GROWTH, float(self.dimension))
        self.lambda_trace.append(self.lambda_value)
        self.refresh_operators()
        if self.logger:
            self.logger.debug(
                "Generation %d | improved=%s | lambda=%.4f",
                self.run_state.generation,
                improved,
                self.lambda_value,
            )


if __name__ == "__main__":
    from ..problems.benchmarks import OneMax

    algo = OneLambdaLambdaEA(Config(eval_budget=2000, seed=5))
    state = algo.run(OneMax(50))
    print("Evaluaciones:", state.evaluations, "| lambda final:", round(algo.lambda_value, 3))
