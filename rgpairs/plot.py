"""
Persistence diagram rendering.

Finite pairs are drawn as (birth, death) points above the diagonal. Essential
pairs have no death, so they sit on a dashed "inf" line drawn a little above
the largest finite value.
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from .diagram import Diagram


def _coords(diagram: Diagram, use_real: bool):
    births, deaths, ess = [], [], []
    for p in diagram:
        b = p.birth_real_value if use_real else p.birth_value
        if p.is_essential:
            ess.append(b)
        else:
            births.append(b)
            deaths.append(p.death_real_value if use_real else p.death_value)
    return births, deaths, ess


def plot_diagram(diagram: Diagram, ax=None, title: Optional[str] = None, use_real: bool = True):
    births, deaths, ess = _coords(diagram, use_real)
    if ax is None:
        _, ax = plt.subplots(figsize=(5, 5))

    values = births + deaths + ess
    lo = min(values) if values else 0.0
    hi = max(values) if values else 1.0
    span = (hi - lo) or 1.0
    inf_y = hi + 0.1 * span

    ax.plot([lo, inf_y], [lo, inf_y], color="0.6", lw=1)
    if births:
        ax.scatter(births, deaths, s=18, color="tab:blue", label=f"pairs ({len(births)})")
    if ess:
        ax.axhline(inf_y, color="0.4", lw=1, ls="--")
        ax.scatter(ess, [inf_y] * len(ess), s=24, marker="^", color="tab:red",
                   label=f"essential ({len(ess)})")
        ax.text(lo, inf_y, "inf", va="bottom", ha="left", fontsize=8)

    ax.set_xlabel("birth")
    ax.set_ylabel("death")
    ax.set_aspect("equal", adjustable="datalim")
    if title:
        ax.set_title(title)
    if births or ess:
        ax.legend(loc="lower right", fontsize=8)
    return ax


def save_diagram_plot(diagram: Diagram, path: str, title: Optional[str] = None, use_real: bool = True) -> None:
    """Render straight to an Agg canvas; the pyplot backend is left alone."""
    fig = Figure(figsize=(5, 5))
    canvas = FigureCanvasAgg(fig)
    plot_diagram(diagram, ax=fig.add_subplot(1, 1, 1), title=title, use_real=use_real)
    fig.tight_layout()
    canvas.print_figure(path, dpi=150)
