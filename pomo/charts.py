"""Matplotlib chart of completed work sessions per day.

The figure uses a dark theme close to the terminal output.
"""

from __future__ import annotations

import io
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # non-interactive backend -- render to image buffers
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from PIL import Image

from pomo.models import DailyStat

# -- Palette -------------------------------------------------------------
_BG = "#2b2b2b"
_FG = "#e0e0e0"
_WORK_LINE = "#764ba2"
_BREAK_LINE = "#f5576c"
_GRID = "#444444"


def _fig_to_pil(fig: Figure, dpi: int = 100) -> Image.Image:
    """Render a matplotlib Figure to a PIL Image and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight",
                facecolor=fig.get_facecolor(), edgecolor="none")
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf)


def sessions_chart(
    stats: list[DailyStat],
    *,
    title: str = "Last 7 Days",
    show_breaks: bool = False,
    size: tuple[int, int] = (560, 260),
    dpi: int = 100,
) -> Image.Image:
    """Line chart of work sessions per day, labelled by day of month.

    With *show_breaks* a second line shows break sessions.
    """
    x = np.arange(len(stats))
    work = np.array([s.work_sessions for s in stats])
    labels = [str(s.day.day) for s in stats]

    fig_w, fig_h = size[0] / dpi, size[1] / dpi
    fig = Figure(figsize=(fig_w, fig_h), dpi=dpi, facecolor=_BG)
    ax = fig.add_subplot(111)
    ax.set_facecolor(_BG)

    ax.plot(x, work, color=_WORK_LINE, linewidth=2, marker="o",
            markersize=6, markerfacecolor=_WORK_LINE, markeredgecolor="white",
            markeredgewidth=1, label="Work")
    ax.fill_between(x, work, alpha=0.15, color=_WORK_LINE)

    if show_breaks:
        breaks = np.array([s.break_sessions for s in stats])
        ax.plot(x, breaks, color=_BREAK_LINE, linewidth=1.5, marker="o",
                markersize=4, label="Break")
        ax.legend(facecolor=_BG, edgecolor=_GRID, labelcolor=_FG, fontsize=8)

    top = max(int(work.max()) if len(work) else 0, 1)
    ax.set_ylim(0, top + 1)
    ax.yaxis.get_major_locator().set_params(integer=True)
    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_ylabel("Sessions", color=_FG, fontsize=9)
    ax.set_title(title, color=_FG, fontsize=11, fontweight="bold")

    ax.tick_params(colors=_FG, labelsize=8)
    ax.spines["bottom"].set_color(_GRID)
    ax.spines["left"].set_color(_GRID)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.yaxis.grid(color=_GRID, linewidth=0.5)

    return _fig_to_pil(fig, dpi=dpi)


def save_chart(image: Image.Image, path: Path) -> Path:
    """Write *image* as PNG, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    return path
