from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from bitsearch.core.config import Config, ConfigurationError
from bitsearch.core.telemetry import Reporter, setup_logger
from bitsearch.logic.controller import ALGORITHMS, BenchmarkController
from bitsearch.problems.suite import SUITES, BenchmarkSuite, parse_id_range, parse_int_list


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ejecuta un algoritmo evolutivo sobre una suite de problemas pseudo-booleanos.",
        epilog="Ejemplo: bitsearch-run ea pbo 1-2 1-5 10,100 --runs 10 --eval-budget 1000 --seed 1",
    )
    parser.add_argument("algorithm", help=f"Algoritmo: {', '.join(ALGORITHMS)}.")
    parser.add_argument("suite", help=f"Suite de problemas: {', '.join(SUITES)}.")
    parser.add_argument("problems", help="Ids de problema, 'inicio-fin' o lista separada por comas.")
    parser.add_argument("instances", help="Ids de instancia en [1, 100], 'inicio-fin' o lista.")
    parser.add_argument("dimensions", help="Dimensiones separadas por comas (ej. 10,100).")
    parser.add_argument("--artifacts-dir", default="artifacts", help="Carpeta de salida (default: artifacts).")
    parser.add_argument("--runs", type=int, default=1, help="Ejecuciones independientes por problema.")
    parser.add_argument("--eval-budget", type=int, default=10000, help="Evaluaciones maximas por ejecucion.")
    parser.add_argument(
        "--generation-budget",
        type=int,
        default=sys.maxsize,
        help="Generaciones maximas por ejecucion (default: sin limite).",
    )
    parser.add_argument("--seed", type=int, default=42, help="Semilla del flujo aleatorio compartido.")
    parser.add_argument("--log-level", default="INFO", help="Nivel de logging (DEBUG, INFO, ...).")
    parser.add_argument("--save-plots", action="store_true", help="Guarda graficas de convergencia.")
    parser.add_argument("--no-trajectories", action="store_true", help="No escribe los CSV de trayectoria.")
    parser.add_argument("--target", type=float, help="Valor objetivo para registrar el hitting time.")

    ga = parser.add_argument_group("opciones del GA configurable (algoritmo 'ga')")
    ga.add_argument("--mu", type=int, default=1)
    ga.add_argument("--lam", type=int, default=1)
    ga.add_argument("--crossover", default="UNIFORMCROSSOVER")
    ga.add_argument("--crossover-probability", type=float, default=0.0)
    ga.add_argument("--relation", default="OR", help="Relacion cruce/mutacion: IND u OR.")
    ga.add_argument("--p-u", type=float, default=0.5)
    ga.add_argument("--mutation", default="BINOMIALSAMPLE")
    ga.add_argument("--mutation-strength", type=int, default=1)
    ga.add_argument("--mutation-rate", type=float, default=0.01)
    ga.add_argument("--mutation-rate-scale", type=float, help="Si se indica, tasa = escala / n.")
    ga.add_argument("--normal-mean", type=float, default=1.0)
    ga.add_argument("--normal-sd", type=float, default=0.01)
    ga.add_argument("--beta", type=float, default=1.5, help="Exponente de la mutacion power-law.")
    ga.add_argument("--selection", default="BESTPLUS")
    ga.add_argument("--tournament-k", type=int, default=2)
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    return Config(
        mu=args.mu,
        lam=args.lam,
        crossover_probability=args.crossover_probability,
        crossover_mutation_relation=args.relation,
        crossover=args.crossover,
        p_u=args.p_u,
        mutation=args.mutation,
        mutation_strength=args.mutation_strength,
        mutation_rate=args.mutation_rate,
        mutation_rate_scale=args.mutation_rate_scale,
        normal_mean=args.normal_mean,
        normal_sd=args.normal_sd,
        power_law_beta=args.beta,
        selection=args.selection,
        tournament_k=args.tournament_k,
        eval_budget=args.eval_budget,
        generation_budget=args.generation_budget,
        independent_runs=args.runs,
        seed=args.seed,
        hitting_target=args.target,
        artifacts_dir=args.artifacts_dir,
        save_plots=args.save_plots,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = setup_logger(args.log_level)
    try:
        cfg = build_config(args)
        suite = BenchmarkSuite(
            parse_id_range(args.problems, 1, 25),
            parse_id_range(args.instances, 1, 100),
            parse_int_list(args.dimensions, 2, 20000),
            name=args.suite,
        )
        controller = BenchmarkController(
            cfg, args.algorithm, logger=logger, write_trajectories=not args.no_trajectories
        )
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    reporter = Reporter(cfg.artifacts_dir, logger=logger)
    reporter.bootstrap(cfg)
    results = controller.run(suite)
    reporter.save_metrics(controller.metrics)
    reporter.save_results(results)
    logger.info("Results saved to %s", reporter.dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
