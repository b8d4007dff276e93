"""
Herramientas de registro y telemetria compartidas por todos los modulos.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Config, Direction

LOGGER_NAME = "bitsearch"


def setup_logger(level: str = "INFO") -> logging.Logger:
    """Configura un logger estandar reutilizable en toda la aplicacion."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    fmt = "[%(asctime)s] %(levelname)s - %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return logger


@dataclass
class RunSummary:
    algorithm: str
    problem: str
    problem_id: int
    instance_id: int
    dimension: int
    run_index: int
    evaluations: int
    generations: int
    best_fitness: float
    optimum_found: bool
    hitting_time: Optional[int] = None
    wall_time_s: float = 0.0


class MetricsLogger:
    """Acumula el resumen de cada ejecucion independiente."""

    def __init__(self, direction: Direction = Direction.MAXIMIZATION) -> None:
        self.direction = direction
        self.start_time = time.time()
        self.phases: Dict[str, float] = {}
        self.runs: List[RunSummary] = []
        self.eval_count = 0

    def mark_phase(self, name: str) -> None:
        self.phases[name] = time.time() - self.start_time

    def record_run(self, summary: RunSummary) -> None:
        self.runs.append(summary)
        self.eval_count += summary.evaluations

    def best_per_problem(self) -> Dict[str, float]:
        best: Dict[str, float] = {}
        for run in self.runs:
            key = f"{run.problem}_i{run.instance_id}_d{run.dimension}"
            if key not in best or self.direction.is_better(run.best_fitness, best[key]):
                best[key] = run.best_fitness
        return best

    def to_dict(self) -> Dict[str, Any]:
        total = max(time.time() - self.start_time, 1e-9)
        hits = sum(1 for r in self.runs if r.optimum_found)
        return {
            "wall_time_s": total,
            "phases": self.phases,
            "eval_count": self.eval_count,
            "runs": len(self.runs),
            "optimum_hits": hits,
            "run_history": [asdict(r) for r in self.runs],
        }


class Reporter:
    """Gestiona archivos de salida en la carpeta de artefactos."""

    def __init__(self, artifacts_dir: str, logger: Optional[logging.Logger] = None) -> None:
        self.dir = Path(artifacts_dir)
        self.dir.mkdir(parents=True, exist_ok=True)
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def save_json(self, name: str, payload: Dict[str, Any]) -> Path:
        path = self.dir / name
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=str)
        return path

    def save_config(self, cfg: Config) -> Path:
        return self.save_json("config.json", asdict(cfg))

    def save_metrics(self, metrics: MetricsLogger) -> Path:
        return self.save_json("metrics.json", metrics.to_dict())

    def save_results(self, results: Dict[str, Any]) -> Path:
        return self.save_json("results.json", results)

    def bootstrap(self, cfg: Config) -> None:
        self.save_config(cfg)
        if self.logger:
            self.logger.info("Saved config.json to artifacts directory")


if __name__ == "__main__":
    log = setup_logger()
    metrics = MetricsLogger()
    metrics.mark_phase("demo")
    rep = Reporter("artifacts", logger=log)
    rep.bootstrap(Config())
    rep.save_metrics(metrics)
    log.info("Telemetria registrada correctamente.")
