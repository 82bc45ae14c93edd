"""Monthly trend chart rendering."""

from __future__ import annotations

from io import BytesIO
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import matplotlib.ticker as mticker  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..core import TrendPoint  # noqa: E402


def build_trend_chart(points: Sequence[TrendPoint], *, title: str = "", color: str = "#10b981") -> Figure:
    """Line chart of cumulative completion rate for the current month.

    The y axis is fixed to 0-100% so charts for different habits compare
    directly.
    """

    fig, ax = plt.subplots(figsize=(8, 4))

    if not points:
        ax.text(0.5, 0.5, "No data for this month yet", ha="center", va="center", fontsize=12, color="#999")
        ax.axis("off")
        return fig

    days = [point.date.day for point in points]
    rates = [point.completion_rate for point in points]

    ax.plot(days, rates, color=color, linewidth=2.2, marker="o", markersize=3.5)
    ax.fill_between(days, rates, color=color, alpha=0.15)
    ax.set_ylim(0, 100)
    ax.set_xlim(days[0], max(days[-1], days[0] + 1))
    ax.yaxis.set_major_formatter(mticker.PercentFormatter())
    ax.xaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.set_xlabel(points[0].date.strftime("%B %Y"))
    ax.set_ylabel("Completion rate")
    ax.grid(True, axis="y", alpha=0.3)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
    if title:
        ax.set_title(title, fontsize=13, fontweight="bold")

    fig.tight_layout()
    return fig


def render_png(figure: Figure, *, dpi: int = 100) -> bytes:
    """Serialize ``figure`` to PNG bytes and release it."""

    buffer = BytesIO()
    try:
        figure.savefig(buffer, format="png", bbox_inches="tight", dpi=dpi)
    finally:
        plt.close(figure)
    return buffer.getvalue()


__all__ = ["build_trend_chart", "render_png"]
