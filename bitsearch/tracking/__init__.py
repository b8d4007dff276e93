"""
Registro de trayectorias de evaluacion en CSV.
"""

from .csv_logger import TRAJECTORY_HEADER, CsvTrajectoryLogger  # noqa: F401

__all__ = ["TRAJECTORY_HEADER", "CsvTrajectoryLogger"]
