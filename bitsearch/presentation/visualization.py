"""
Visualizacion de convergencia con Matplotlib.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import matplotlib
import numpy as np

History = Sequence[Tuple[int, float]]


class Visualizer:
    def __init__(self, headless: bool = True) -> None:
        self.headless = headless
        if headless:
            matplotlib.use("Agg")

    def convergence_plot(
        self,
        histories: Iterable[Optional[History]],
        path: Optional[Path | str] = None,
        title: str = "Convergencia: mejor fitness vs evaluaciones",
        labels: Optional[List[str]] = None,
    ) -> Optional[Path]:
        """
        Dibuja el mejor valor encontrado frente a evaluaciones, una curva
        escalonada por ejecucion. Devuelve la ruta si se guardo la figura.
        """
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(8, 5))
        histories_list = list(histories)
        colors = plt.get_cmap("tab10")(np.arange(max(len(histories_list), 1)) % 10)

        plotted = False
        for idx, history in enumerate(histories_list):
            if not history:
                continue
            arr = np.asarray(history, dtype=float)
            label = labels[idx] if labels and idx < len(labels) else f"Run {idx + 1}"
            ax.step(arr[:, 0], arr[:, 1], where="post", color=colors[idx], label=label)
            plotted = True

        ax.set_xlabel("Evaluaciones")
        ax.set_ylabel("Mejor fitness")
        ax.set_title(title)
        ax.grid(True, alpha=0.3)
        if plotted:
            ax.legend(loc="best")
        else:
            ax.text(0.5, 0.5, "Sin datos", ha="center", va="center", transform=ax.transAxes)
        fig.tight_layout()

        saved: Optional[Path] = None
        if path is not None:
            saved = Path(path)
            saved.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(saved, dpi=120)
        if self.headless:
            plt.close(fig)
        else:
            plt.show()
        return saved


if __name__ == "__main__":
    viz = Visualizer(headless=True)
    print("Figura:", viz.convergence_plot([[(1, 3.0), (5, 6.0), (12, 10.0)]], path="artifacts/demo.png"))
