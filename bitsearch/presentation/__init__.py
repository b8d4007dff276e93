"""
Capa de presentacion: graficas Matplotlib de convergencia.
"""

from .visualization import Visualizer  # noqa: F401

__all__ = ["Visualizer"]


if __name__ == "__main__":
    print("Ejecuta Visualizer.convergence_plot() para pruebas.")
