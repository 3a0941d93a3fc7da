"""SVG geometry for the dashboard charts.

The template only draws what these helpers compute, so the arithmetic
stays testable without rendering HTML.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

BAR_COLOR = "#6366f1"


@dataclass
class Bar:
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float


@dataclass
class Tick:
    value: float
    y: float


@dataclass
class BarChart:
    width: int
    height: int
    plot_left: float
    plot_bottom: float
    bars: List[Bar]
    ticks: List[Tick]
    color: str = BAR_COLOR

    @property
    def empty(self) -> bool:
        return not self.bars


@dataclass
class Slice:
    label: str
    value: float
    color: str
    path: str
    label_x: float
    label_y: float
    share: float
    full_circle: bool = False


@dataclass
class PieChart:
    width: int
    height: int
    cx: float
    cy: float
    radius: float
    slices: List[Slice]

    @property
    def empty(self) -> bool:
        return not self.slices


def nice_step(max_value: float, tick_count: int = 4) -> float:
    """Round ``max_value / tick_count`` up to 1, 2, 2.5 or 5 times a power of ten."""
    if max_value <= 0:
        return 1.0
    raw = max_value / tick_count
    magnitude = 10 ** math.floor(math.log10(raw))
    for factor in (1, 2, 2.5, 5, 10):
        step = factor * magnitude
        if step >= raw:
            return step
    return 10 * magnitude


def bar_chart(
    series: Sequence[Dict[str, object]],
    width: int = 480,
    height: int = 250,
    tick_count: int = 4,
) -> BarChart:
    """Lay out one bar per ``{"month", "total"}`` entry, left to right."""
    left, right, top, bottom = 56.0, 12.0, 10.0, 30.0
    plot_w = width - left - right
    plot_h = height - top - bottom
    plot_bottom = height - bottom

    max_value = max((float(row["total"]) for row in series), default=0.0)
    step = nice_step(max_value, tick_count)
    ceiling = step * max(1, math.ceil(max_value / step)) if max_value > 0 else step * tick_count
    ticks = []
    value = 0.0
    while value <= ceiling + step / 2:
        ticks.append(Tick(value=value, y=round(plot_bottom - plot_h * value / ceiling, 2)))
        value += step

    bars = []
    if series:
        slot = plot_w / len(series)
        bar_w = slot * 0.6
        for idx, row in enumerate(series):
            total = float(row["total"])
            bar_h = plot_h * total / ceiling
            bars.append(
                Bar(
                    label=str(row["month"]),
                    value=total,
                    x=round(left + slot * idx + (slot - bar_w) / 2, 2),
                    y=round(plot_bottom - bar_h, 2),
                    width=round(bar_w, 2),
                    height=round(bar_h, 2),
                )
            )
    return BarChart(
        width=width,
        height=height,
        plot_left=left,
        plot_bottom=plot_bottom,
        bars=bars,
        ticks=ticks,
    )


def _point(cx: float, cy: float, radius: float, angle: float):
    # Angles are measured clockwise from twelve o'clock.
    return (
        round(cx + radius * math.sin(angle), 2),
        round(cy - radius * math.cos(angle), 2),
    )


def pie_chart(
    breakdown: Sequence[Dict[str, object]],
    width: int = 320,
    height: int = 250,
    radius: float = 80.0,
) -> PieChart:
    """Slice a circle per ``{"category", "total", "color"}`` entry in order.

    Zero totals are skipped since they have no visible area.
    """
    cx, cy = width / 2, height / 2
    rows = [row for row in breakdown if float(row["total"]) > 0]
    grand_total = sum(float(row["total"]) for row in rows)
    slices = []
    start = 0.0
    for row in rows:
        value = float(row["total"])
        share = value / grand_total
        sweep = share * 2 * math.pi
        end = start + sweep
        x1, y1 = _point(cx, cy, radius, start)
        x2, y2 = _point(cx, cy, radius, end)
        large_arc = 1 if sweep > math.pi else 0
        path = f"M {cx} {cy} L {x1} {y1} A {radius} {radius} 0 {large_arc} 1 {x2} {y2} Z"
        lx, ly = _point(cx, cy, radius + 18, start + sweep / 2)
        slices.append(
            Slice(
                label=str(row["category"]),
                value=value,
                color=str(row["color"]),
                path=path,
                label_x=lx,
                label_y=ly,
                share=round(share, 4),
                full_circle=len(rows) == 1,
            )
        )
        start = end
    return PieChart(width=width, height=height, cx=cx, cy=cy, radius=radius, slices=slices)
