"""
Capa logica: operadores geneticos, motores de busqueda y controlador de benchmarks.
"""

from .controller import ALGORITHMS, BenchmarkController, build_algorithm  # noqa: F401
from .crossover import OnePointCrossover, TwoPointCrossover, UniformCrossover  # noqa: F401
from .base import SearchAlgorithm  # noqa: F401
from .engine import EngineState, EvolutionEngine, RunState  # noqa: F401
from .fea import FrequencyFitnessEA, FrequencyTable  # noqa: F401
from .lambda_lambda import OneLambdaLambdaEA  # noqa: F401
from .two_rate import TwoRateEA  # noqa: F401
from .mutation import BinomialStrength, NormalStrength, PowerLawStrength, StaticStrength  # noqa: F401
from .selection import BestSelection, ProportionalSelection, TournamentSelection  # noqa: F401

__all__ = [
    "ALGORITHMS",
    "BenchmarkController",
    "build_algorithm",
    "OnePointCrossover",
    "TwoPointCrossover",
    "UniformCrossover",
    "EngineState",
    "EvolutionEngine",
    "RunState",
    "FrequencyFitnessEA",
    "FrequencyTable",
    "OneLambdaLambdaEA",
    "TwoRateEA",
    "SearchAlgorithm",
    "BinomialStrength",
    "NormalStrength",
    "PowerLawStrength",
    "StaticStrength",
    "BestSelection",
    "ProportionalSelection",
    "TournamentSelection",
]


if __name__ == "__main__":
    from ..core.config import Config
    from ..problems.benchmarks import OneMax

    engine = build_algorithm("ea", Config(eval_budget=300))
    print("Mejor fitness en OneMax(20):", engine.run(OneMax(20)).best_fitness)
