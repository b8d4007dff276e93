"""
Componentes compartidos por todas las capas del sistema: configuraciones,
telemetria, contratos externos y el tipo Poblacion.
"""

from .config import (  # noqa: F401
    Config,
    ConfigurationError,
    CrossoverKind,
    CrossoverMutationRelation,
    Direction,
    MutationKind,
    OperatorConfiguration,
    SelectionKind,
    make_rng,
)
from .interfaces import EvaluationRecord, Problem, Suite, TrajectoryLogger  # noqa: F401
from .population import Population, as_candidate  # noqa: F401
from .telemetry import MetricsLogger, Reporter, RunSummary, setup_logger  # noqa: F401

__all__ = [
    "Config",
    "ConfigurationError",
    "CrossoverKind",
    "CrossoverMutationRelation",
    "Direction",
    "MutationKind",
    "OperatorConfiguration",
    "SelectionKind",
    "make_rng",
    "EvaluationRecord",
    "Problem",
    "Suite",
    "TrajectoryLogger",
    "Population",
    "as_candidate",
    "MetricsLogger",
    "Reporter",
    "RunSummary",
    "setup_logger",
]


if __name__ == "__main__":
    logger = setup_logger()
    logger.info("Core module smoke test completado.")
