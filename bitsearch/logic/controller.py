"""
Controlador de benchmarks: construye el algoritmo por nombre, recorre la
suite y acumula metricas de cada ejecucion independiente.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.config import Config, ConfigurationError, make_rng
from ..core.interfaces import Suite
from ..core.telemetry import LOGGER_NAME, MetricsLogger, RunSummary
from ..tracking.csv_logger import CsvTrajectoryLogger
from .base import SearchAlgorithm
from .engine import EvolutionEngine
from .fea import FrequencyFitnessEA
from .lambda_lambda import OneLambdaLambdaEA
from .two_rate import TwoRateEA

# Escala c de la tasa de mutacion c/n de las variantes (1+1)-EA>0.
EA_RATE_SCALES = {"ea": 1.0, "ea2": 2.0, "ea23": 1.5}

ALGORITHMS: Dict[str, str] = {
    "ea": "(1+1)-EA>0, p = 1/n",
    "ea2": "(1+1)-EA>0, p = 2/n",
    "ea23": "(1+1)-EA>0, p = 1.5/n",
    "rls": "randomized local search",
    "fga": "(1+1) fast GA (power-law mutation)",
    "llea": "self-adaptive (1+(lambda,lambda)) GA",
    "ga": "configurable (mu+lambda) / (mu,lambda) GA",
    "fea": "(1+1)-FEA (frequency fitness assignment)",
    "opoea": "(1+1)-EA>0 single-trajectory loop",
    "2ratega": "(1+10)-EA>0 with two-rate mutation self-adaptation",
    "sa": "simulated annealing, exponential schedule",
    "sars": "simulated annealing with doubling restarts",
}


def _one_plus_one(cfg: Config, **overrides: Any) -> Config:
    fields: Dict[str, Any] = {
        "mu": 1,
        "lam": 1,
        "crossover_probability": 0.0,
        "crossover_mutation_relation": "OR",
        "selection": "BESTPLUS",
    }
    fields.update(overrides)
    return dataclasses.replace(cfg, **fields)


def build_algorithm(
    name: str,
    cfg: Config,
    rng: Optional[np.random.Generator] = None,
    logger: Optional[logging.Logger] = None,
) -> SearchAlgorithm:
    key = name.strip().lower()
    rng = rng if rng is not None else make_rng(cfg.seed)
    if key in EA_RATE_SCALES:
        preset = _one_plus_one(cfg, mutation="BINOMIALSAMPLE", mutation_rate_scale=EA_RATE_SCALES[key])
        return EvolutionEngine(preset, rng, logger=logger)
    if key == "rls":
        preset = _one_plus_one(
            cfg,
            crossover_mutation_relation="IND",
            mutation="STATICSAMPLE",
            mutation_strength=1,
            mutation_rate_scale=None,
        )
        return EvolutionEngine(preset, rng, logger=logger)
    if key == "fga":
        preset = _one_plus_one(cfg, mutation="POWERLAWSAMPLE", mutation_rate_scale=None)
        return EvolutionEngine(preset, rng, logger=logger)
    if key == "llea":
        return OneLambdaLambdaEA(cfg, rng, initial_lambda=1.0, logger=logger)
    if key == "ga":
        return EvolutionEngine(cfg, rng, logger=logger)
    if key == "fea":
        return FrequencyFitnessEA(cfg, rng, acceptance="frequency", logger=logger)
    if key == "opoea":
        return FrequencyFitnessEA(cfg, rng, acceptance="elitist", logger=logger)
    if key == "2ratega":
        return TwoRateEA(cfg, rng, lam=10, logger=logger)
    if key == "sa":
        return FrequencyFitnessEA(cfg, rng, acceptance="annealing", logger=logger)
    if key == "sars":
        return FrequencyFitnessEA(cfg, rng, acceptance="annealing", restarts=True, logger=logger)
    raise ConfigurationError(
        f"Unknown algorithm '{name}'; available options: {', '.join(ALGORITHMS)}."
    )


class BenchmarkController:
    def __init__(
        self,
        cfg: Config,
        algorithm_name: str,
        logger: Optional[logging.Logger] = None,
        write_trajectories: bool = True,
    ) -> None:
        self.cfg = cfg
        self.algorithm_name = algorithm_name.strip().lower()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.write_trajectories = write_trajectories
        self.metrics = MetricsLogger(cfg.direction)
        self.histories: Dict[str, List[List[Tuple[int, float]]]] = {}
        # Se valida el nombre antes de tocar el sistema de archivos.
        self.algorithm = build_algorithm(
            self.algorithm_name, cfg, make_rng(cfg.seed), logger=self.logger
        )

    def run(self, suite: Suite) -> Dict[str, Any]:
        start = time.time()
        algo = self.algorithm
        trajectory: Optional[CsvTrajectoryLogger] = None
        if self.write_trajectories:
            trajectory = CsvTrajectoryLogger(
                Path(self.cfg.artifacts_dir) / "trajectories", self.algorithm_name, logger=self.logger
            )
            trajectory.activate()
            algo.assign_logger(trajectory)

        if self.logger:
            self.logger.info(
                "Starting benchmark | algorithm=%s | runs=%d | eval_budget=%d | seed=%d",
                self.algorithm_name,
                self.cfg.independent_runs,
                self.cfg.eval_budget,
                self.cfg.seed,
            )
        self.metrics.mark_phase("setup")

        problem = suite.next_problem()
        while problem is not None:
            key = f"{problem.name}_i{problem.instance_id}_d{problem.dimension()}"
            algo.run_index = 0
            for run_index in range(self.cfg.independent_runs):
                run_start = time.time()
                state = algo.run(problem)
                self.metrics.record_run(
                    RunSummary(
                        algorithm=self.algorithm_name,
                        problem=problem.name,
                        problem_id=int(problem.problem_id),
                        instance_id=int(problem.instance_id),
                        dimension=int(problem.dimension()),
                        run_index=run_index,
                        evaluations=state.evaluations,
                        generations=state.generation,
                        best_fitness=float(state.best_fitness),
                        optimum_found=state.optimum_found,
                        hitting_time=state.hitting_time,
                        wall_time_s=time.time() - run_start,
                    )
                )
                self.histories.setdefault(key, []).append(list(state.history))
            problem = suite.next_problem()

        if trajectory is not None:
            trajectory.clear()
        self.metrics.mark_phase("completed")

        if self.cfg.save_plots:
            self._save_plots()

        hits = sum(1 for r in self.metrics.runs if r.optimum_found)
        if self.logger:
            self.logger.info(
                "Benchmark completed | runs=%d | optimum hits=%d | evals=%d | wall=%.1fs",
                len(self.metrics.runs),
                hits,
                self.metrics.eval_count,
                time.time() - start,
            )
        return {
            "status": "completed",
            "algorithm": self.algorithm_name,
            "runs": len(self.metrics.runs),
            "optimum_hits": hits,
            "evals": self.metrics.eval_count,
            "best_per_problem": self.metrics.best_per_problem(),
            "summaries": [asdict(r) for r in self.metrics.runs],
        }

    def _save_plots(self) -> None:
        from ..presentation.visualization import Visualizer

        viz = Visualizer(headless=self.cfg.headless)
        plots_dir = Path(self.cfg.artifacts_dir) / "plots"
        for key, histories in self.histories.items():
            path = viz.convergence_plot(
                histories,
                path=plots_dir / f"{self.algorithm_name}_{key}.png",
                title=f"{self.algorithm_name} | {key}",
            )
            if self.logger:
                self.logger.info("Saved convergence plot to %s", path)


if __name__ == "__main__":
    from ..core.telemetry import setup_logger
    from ..problems.suite import BenchmarkSuite

    cfg = Config(eval_budget=200, independent_runs=2)
    controller = BenchmarkController(cfg, "ea", logger=setup_logger(), write_trajectories=False)
    print("Resultado de smoke test:", controller.run(BenchmarkSuite([1, 2], [1], [16])))
