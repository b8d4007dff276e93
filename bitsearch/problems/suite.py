"""
Suite de benchmarks: producto problema -> instancia -> dimension.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from ..core.config import ConfigurationError
from .benchmarks import PROBLEMS, PseudoBooleanProblem, make_problem

SUITES = ("pbo",)


class BenchmarkSuite:
    def __init__(
        self,
        problem_ids: Sequence[int],
        instance_ids: Sequence[int] = (1,),
        dimensions: Sequence[int] = (16,),
        name: str = "pbo",
    ) -> None:
        if name.lower() not in SUITES:
            raise ConfigurationError(
                f"Unknown suite '{name}'; available options: {', '.join(SUITES)}."
            )
        unknown = [pid for pid in problem_ids if int(pid) not in PROBLEMS]
        if unknown:
            raise ConfigurationError(f"Unknown problem ids for suite '{name}': {unknown}.")
        if not problem_ids or not instance_ids or not dimensions:
            raise ConfigurationError("Suite needs at least one problem, instance and dimension.")
        self.name = name.lower()
        self.problem_ids = [int(p) for p in problem_ids]
        self.instance_ids = [int(i) for i in instance_ids]
        self.dimensions = [int(d) for d in dimensions]
        self._cursor: Optional[Iterator[PseudoBooleanProblem]] = None

    def __len__(self) -> int:
        return len(self.problem_ids) * len(self.instance_ids) * len(self.dimensions)

    def __iter__(self) -> Iterator[PseudoBooleanProblem]:
        for pid in self.problem_ids:
            for iid in self.instance_ids:
                for dim in self.dimensions:
                    yield make_problem(pid, iid, dim)

    def next_problem(self) -> Optional[PseudoBooleanProblem]:
        """Siguiente problema de la suite, o None cuando se agota."""
        if self._cursor is None:
            self._cursor = iter(self)
        return next(self._cursor, None)

    def rewind(self) -> None:
        self._cursor = None


def parse_int_ranges(raw: str, lower: int, upper: int) -> List[int]:
    """
    Interpreta "a-b", "a,b,c" o combinaciones ("1-3,7") acotadas a [lower, upper].
    """
    values: List[int] = []
    for token in str(raw).split(","):
        token = token.strip()
        if not token:
            continue
        try:
            if "-" in token:
                start_s, end_s = token.split("-", 1)
                start, end = int(start_s), int(end_s)
            else:
                start = end = int(token)
        except ValueError:
            raise ConfigurationError(f"Cannot parse integer list '{raw}'.") from None
        if start > end:
            raise ConfigurationError(f"Descending range '{token}' in '{raw}'.")
        chunk = list(range(start, end + 1))
        for value in chunk:
            if not lower <= value <= upper:
                raise ConfigurationError(f"Value {value} outside [{lower}, {upper}] in '{raw}'.")
        values.extend(chunk)
    if not values:
        raise ConfigurationError(f"Empty integer list '{raw}'.")
    return values


def parse_id_range(raw: str, lower: int = 1, upper: int = 100) -> List[int]:
    return parse_int_ranges(raw, lower, upper)


def parse_int_list(raw: str, lower: int = 2, upper: int = 20000) -> List[int]:
    return parse_int_ranges(raw, lower, upper)


if __name__ == "__main__":
    suite = BenchmarkSuite(parse_id_range("1-2"), parse_id_range("1"), parse_int_list("10,20"))
    print("Problemas:", list(suite))
