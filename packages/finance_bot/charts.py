"""Pie-chart rendering for the monthly report.

Rendering runs on worker threads, so this module builds figures with the
object-oriented ``matplotlib.figure.Figure`` API and the Agg canvas and never
touches ``pyplot``'s global state.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from matplotlib.figure import Figure

# Same palette order the chat replies have always used.
PALETTE: tuple[str, ...] = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
    "#C9CBCF",
    "#8BC34A",
    "#E91E63",
    "#795548",
    "#607D8B",
)


class ChartRenderer(Protocol):
    def render(self, series: Sequence[tuple[str, Decimal]], title: str) -> bytes:
        """Return an image of ``series`` as encoded bytes."""
        ...


class MatplotlibChartRenderer:
    """Render ``(label, value)`` series as a PNG pie chart.

    Parameters
    ----------
    width, height:
        Output size in pixels.
    dpi:
        Resolution used to convert the pixel size to inches.
    """

    def __init__(self, *, width: int = 800, height: int = 600, dpi: int = 100) -> None:
        self._figsize = (width / dpi, height / dpi)
        self._dpi = dpi

    def render(self, series: Sequence[tuple[str, Decimal]], title: str) -> bytes:
        points = [(label, float(value)) for label, value in series if value > 0]
        if not points:
            raise ValueError("cannot render a pie chart without positive values")

        labels = [label for label, _ in points]
        values = [value for _, value in points]
        colors = [PALETTE[i % len(PALETTE)] for i in range(len(values))]

        fig = Figure(figsize=self._figsize, dpi=self._dpi, facecolor="white")
        ax = fig.add_subplot()
        _wedges, _texts, autotexts = ax.pie(
            values,
            colors=colors,
            autopct="%1.1f%%",
            startangle=90,
            counterclock=False,
            wedgeprops={"edgecolor": "white", "linewidth": 2},
            textprops={"fontsize": 14, "fontweight": "bold"},
        )
        for autotext in autotexts:
            autotext.set_color("white")
        ax.set_title(title, fontsize=18, pad=20)
        ax.axis("equal")
        ax.legend(
            labels,
            loc="upper center",
            bbox_to_anchor=(0.5, -0.02),
            ncol=min(len(labels), 4),
            frameon=False,
            fontsize=12,
        )

        buf = io.BytesIO()
        fig.savefig(buf, format="png", bbox_inches="tight", facecolor="white")
        return buf.getvalue()


__all__ = [
    "ChartRenderer",
    "MatplotlibChartRenderer",
    "PALETTE",
]
