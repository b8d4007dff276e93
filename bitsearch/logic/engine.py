"""
Motor evolutivo configurable (mu + lambda) / (mu, lambda) para problemas
pseudo-booleanos de caja negra.

El motor compone un operador de cruce, uno de mutacion y uno de seleccion
que comparten un unico generador aleatorio. Ciclo de vida de una ejecucion:

    IDLE -> PREPARING -> INITIALIZING -> GENERATING -> TERMINATED

La terminacion se comprueba al inicio de cada generacion y despues de cada
evaluacion individual, de modo que agotar el presupuesto a mitad de lote
detiene la ejecucion sin completar el lote ni llamar a la seleccion.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import time
from typing import Optional, Sequence, Tuple

import numpy as np

from ..core.config import (
    Config,
    ConfigurationError,
    CrossoverMutationRelation,
    OperatorConfiguration,
    make_rng,
)
from ..core.interfaces import Problem, TrajectoryLogger
from ..core.population import CANDIDATE_DTYPE, Population
from ..perf_timings.timers import time_block, time_section
from .base import EngineState, RunState, SearchAlgorithm
from .crossover import CrossoverStrategy, build_crossover
from .mutation import BinomialStrength, MutationStrategy, build_mutation
from .selection import SelectionStrategy, build_selection

__all__ = ["EngineState", "EvolutionEngine", "RunState"]


class EvolutionEngine(SearchAlgorithm):
    def __init__(
        self,
        cfg: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        *,
        crossover: Optional[CrossoverStrategy] = None,
        mutation: Optional[MutationStrategy] = None,
        selection: Optional[SelectionStrategy] = None,
        trajectory_logger: Optional[TrajectoryLogger] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(cfg, rng, trajectory_logger=trajectory_logger, logger=logger)
        self.parents = Population(0)
        self.offspring = Population(0)
        self.configure(self.cfg.operators())
        if crossover is not None:
            self.crossover = crossover
        if mutation is not None:
            self.mutation = mutation
        if selection is not None:
            self.selection = selection

    # Configuracion ----------------------------------------------------------
    @property
    def mu(self) -> int:
        return self.cfg.mu

    @property
    def lam(self) -> int:
        return self.cfg.lam

    def offspring_count(self) -> int:
        return self.lam

    def configure(self, ops: OperatorConfiguration) -> None:
        """Valida la configuracion y construye los operadores."""
        ops.validate(self.cfg.mu, self.cfg.lam)
        # Se construyen todos antes de asignar: un fallo no deja el motor a medias.
        crossover = build_crossover(ops.crossover, self.rng, ops.p_u)
        mutation = build_mutation(ops, self.rng)
        selection = build_selection(ops, self.rng, self.cfg.mu, self.direction)
        self.ops = ops
        self.crossover, self.mutation, self.selection = crossover, mutation, selection

    def set_all_parameters(
        self,
        integer_params: Sequence[int],
        continuous_params: Sequence[float],
        category_params: Sequence[str],
    ) -> None:
        """
        Superficie de configuracion posicional.

        integer_params: (mu, lambda, l, k)
        continuous_params: (p_c, p_u, mutation_rate, r_n, sigma_n, beta)
        category_params: (relacion IND|OR, cruce, mutacion, seleccion)

        Se trabaja sobre una copia de la configuracion; un vector rechazado
        deja intactos el motor y la `Config` del llamador.
        """
        for label, values, expected in (
            ("integer", integer_params, 4),
            ("continuous", continuous_params, 6),
            ("categorical", category_params, 4),
        ):
            if len(values) != expected:
                raise ConfigurationError(
                    f"Expected {expected} {label} parameters, got {len(values)}."
                )
        mu, lam, strength, k = (int(v) for v in integer_params)
        p_c, p_u, rate, r_n, sigma_n, beta = (float(v) for v in continuous_params)
        relation, crossover, mutation, selection = (str(v) for v in category_params)
        candidate = dataclasses.replace(
            self.cfg,
            mu=mu,
            lam=lam,
            mutation_strength=strength,
            tournament_k=k,
            crossover_probability=p_c,
            p_u=p_u,
            mutation_rate=rate,
            normal_mean=r_n,
            normal_sd=sigma_n,
            power_law_beta=beta,
            crossover_mutation_relation=relation,
            crossover=crossover,
            mutation=mutation,
            selection=selection,
            mutation_rate_scale=None,
        )
        ops = candidate.operators()
        previous = self.cfg
        self.cfg = candidate
        try:
            self.configure(ops)
        except ConfigurationError:
            self.cfg = previous
            raise

    def set_seed(self, seed: int) -> None:
        self.rng = make_rng(seed)
        for op in (self.crossover, self.mutation, self.selection):
            op.rng = self.rng

    # Ciclo de una ejecucion -------------------------------------------------
    def prepare(self) -> None:
        self.start_problem()
        self.mutation.prepare(self.dimension)
        if self.cfg.mutation_rate_scale is not None and isinstance(self.mutation, BinomialStrength):
            self.mutation.set_rate(self.cfg.mutation_rate_scale / self.dimension)
        self.parents = Population(self.dimension)
        self.offspring = Population(self.dimension)

    def initialize(self) -> None:
        self.state = EngineState.INITIALIZING
        with time_block("initialization", run_index=self.run_index, extra={"mu": self.mu}):
            for _ in range(self.mu):
                x = (self.rng.random(self.dimension) < 0.5).astype(CANDIDATE_DTYPE)
                self.parents.add(x, self.evaluate(x))

    def select_two_parents(self) -> Tuple[int, int]:
        first = int(self.rng.random() * self.mu)
        if self.mu < 2:
            return first, first
        second = first
        while second == first:
            second = int(self.rng.random() * self.mu)
        return first, second

    def breed(self, first: int, second: int) -> Tuple[np.ndarray, float]:
        """
        Construye un descendiente y su fitness, evitando evaluaciones redundantes.
        """
        x1, f1 = self.parents[first]
        x2, f2 = self.parents[second]
        child = x1.copy()
        c_flipped: Tuple[int, ...] = ()
        m_flipped: Tuple[int, ...] = ()

        draw = self.rng.random()
        crossed = draw < self.ops.crossover_probability
        if crossed:
            child, c_flipped = self.crossover.cross(x1, x2)
        if self.ops.relation is CrossoverMutationRelation.IND or not crossed:
            m_flipped = self.mutation.mutate(child)

        if c_flipped == m_flipped:
            # Los volteos de cruce y mutacion se cancelan: hijo identico al primer padre.
            return child, f1
        if np.array_equal(child, x2):
            return child, f2
        return child, self.evaluate(child)

    def generation_step(self) -> bool:
        """Ejecuta una generacion; devuelve False si termino a mitad de lote."""
        rs = self.run_state
        rs.generation += 1
        self.offspring.clear()
        with time_block("generation", run_index=self.run_index, generation=rs.generation):
            for _ in range(self.lam):
                first, second = self.select_two_parents()
                child, fitness = self.breed(first, second)
                self.offspring.add(child, fitness)
                if self.termination():
                    return False
        self.offspring.require_size(self.lam, "offspring population")
        self.parents.require_size(self.mu, "parent population")
        with time_block("selection", run_index=self.run_index, generation=rs.generation):
            self.parents.replace_with(self.selection.select(self.parents, self.offspring))
        self.adaptive_strategy()
        return True

    def adaptive_strategy(self) -> None:
        """Gancho para variantes adaptativas; se invoca al final de cada generacion."""

    def evolve(self) -> None:
        self.state = EngineState.GENERATING
        while not self.termination():
            if not self.generation_step():
                break

    @time_section("run", run_index=lambda self, *args, **kwargs: self.run_index)
    def run(self, problem: Optional[Problem] = None) -> RunState:
        """Ejecuta una ejecucion independiente y devuelve una copia de su estado."""
        if problem is not None:
            self.assign_problem(problem)
        started = time.time()
        self.prepare()
        if self.logger:
            self.logger.info(
                "Run %d started | problem=%s | n=%d | mu=%d | lambda=%d | eval_budget=%d",
                self.run_index,
                getattr(self.problem, "name", "?"),
                self.dimension,
                self.mu,
                self.offspring_count(),
                self.cfg.eval_budget,
            )
        self.initialize()
        self.evolve()
        self.state = EngineState.TERMINATED
        rs = self.run_state
        if self.logger:
            self.logger.info(
                "Run %d finished | problem=%s | n=%d | evals=%d | generations=%d | best=%.6g | hit=%s | wall=%.2fs",
                self.run_index,
                getattr(self.problem, "name", "?"),
                self.dimension,
                rs.evaluations,
                rs.generation,
                rs.best_fitness,
                rs.optimum_found,
                time.time() - started,
            )
        self.run_index += 1
        return copy.deepcopy(rs)


if __name__ == "__main__":
    from ..problems.benchmarks import OneMax

    engine = EvolutionEngine(Config(mu=2, lam=2, mutation_rate_scale=1.0, eval_budget=500))
    print("Estado final:", engine.run(OneMax(20)))
