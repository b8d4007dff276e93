"""
Problemas de referencia y suites para los scripts de benchmark y los tests.
"""

from .benchmarks import PROBLEMS, LeadingOnes, OneMax, PseudoBooleanProblem, make_problem  # noqa: F401
from .suite import BenchmarkSuite, parse_id_range, parse_int_list  # noqa: F401

__all__ = [
    "PROBLEMS",
    "LeadingOnes",
    "OneMax",
    "PseudoBooleanProblem",
    "make_problem",
    "BenchmarkSuite",
    "parse_id_range",
    "parse_int_list",
]
