"""Chart configuration and raster rendering of bar, line, pie, scatter and area charts."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont

Color = tuple[int, int, int]

PALETTE: tuple[Color, ...] = (
    (0x18, 0x5F, 0xA5),  # blue
    (0x3B, 0x6D, 0x11),  # green
    (0xBA, 0x75, 0x17),  # amber
    (0x99, 0x35, 0x56),  # pink
    (0x53, 0x4A, 0xB7),  # purple
    (0xD8, 0x5A, 0x30),  # coral
    (0x0F, 0x6E, 0x56),  # teal
    (0xE2, 0x4B, 0x4A),  # red
)

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
_AXIS_COLOR: Color = (0x44, 0x44, 0x41)
_LABEL_COLOR: Color = (0x88, 0x87, 0x80)
_GRID_COLOR: Color = (0xE8, 0xE7, 0xE2)
_AREA_ALPHA = round(0.35 * 255)


class ChartType(Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"
    AREA = "area"
    COLUMN = "column"
    DONUT = "donut"


class LegendPos(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


@dataclass
class ChartSeries:
    name: str = ""
    color: Optional[Color] = None
    x_values: list[float] = field(default_factory=list)
    y_values: list[float] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)


@dataclass
class ChartAxis:
    title: str = ""
    min: float = 0.0
    max: float = 0.0
    auto_range: bool = True
    grid_lines: int = 5
    number_format: str = "General"


@dataclass
class ChartConfig:
    type: ChartType = ChartType.BAR
    title: str = ""
    legend: LegendPos = LegendPos.BOTTOM
    x_axis: ChartAxis = field(default_factory=ChartAxis)
    y_axis: ChartAxis = field(default_factory=ChartAxis)
    show_data_labels: bool = False
    show_3d: bool = False
    stacked: bool = False
    background: Color = WHITE
    series: list[ChartSeries] = field(default_factory=list)


@dataclass(frozen=True)
class PlotRect:
    """An integer rectangle whose right and bottom edges are inclusive."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width - 1

    @property
    def bottom(self) -> int:
        return self.top + self.height - 1

    @property
    def center(self) -> tuple[int, int]:
        return (self.left + self.right) // 2, (self.top + self.bottom) // 2


def _fuzzy_equal(a: float, b: float) -> bool:
    return abs(a - b) * 1e12 <= min(abs(a), abs(b))


def _darker(color: Color, factor: int) -> Color:
    r, g, b = color
    return (round(r * 100 / factor), round(g * 100 / factor), round(b * 100 / factor))


@lru_cache(maxsize=1)
def _font():
    return ImageFont.load_default()


def _text_size(draw: ImageDraw.ImageDraw, text: str) -> tuple[int, int, int, int]:
    return draw.textbbox((0, 0), text, font=_font())


def _draw_text_in(draw, box, text, fill, halign="center", valign="center") -> None:
    x, y, w, h = box
    left, top, right, bottom = _text_size(draw, text)
    tw, th = right - left, bottom - top
    if halign == "center":
        tx = x + (w - tw) / 2
    elif halign == "right":
        tx = x + w - tw
    else:
        tx = x
    ty = y + (h - th) / 2 if valign == "center" else y
    draw.text((tx - left, ty - top), text, fill=fill, font=_font())


def _fill_rect(draw, x: int, y: int, w: int, h: int, color) -> None:
    if w == 0 or h == 0:
        return
    x0, x1 = sorted((x, x + w))
    y0, y1 = sorted((y, y + h))
    draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=color)


def _axis_label(val: float) -> str:
    if val >= 1000:
        return f"{val / 1000.0:.1f}k"
    return str(int(val))


class ChartBase(ABC):
    """Common layout, axes, legend and export; subclasses draw the data."""

    MIN_WIDTH = 300
    MIN_HEIGHT = 200

    def __init__(self, config: Optional[ChartConfig] = None) -> None:
        self.config = config if config is not None else ChartConfig()
        self._callbacks: list[Callable[[], None]] = []

    def set_config(self, config: ChartConfig) -> None:
        """Replace the configuration and notify listeners."""
        self.config = config
        for callback in self._callbacks:
            callback()

    def on_config_changed(self, callback: Callable[[], None]) -> None:
        """Register ``callback()`` to run whenever the configuration is replaced."""
        self._callbacks.append(callback)

    # ---------- geometry ----------

    def plot_area(self, width: int, height: int) -> PlotRect:
        """The data area inside a chart of the given size."""
        top = 20 if not self.config.title else 44
        bottom = 20 if self.config.legend is LegendPos.NONE else 36
        left, right = 54, 20
        return PlotRect(left, top, width - left - right, height - top - bottom)

    def map_x(self, val: float, plot: PlotRect, lo: float, hi: float) -> float:
        if _fuzzy_equal(hi, lo):
            return float(plot.left)
        return plot.left + (val - lo) / (hi - lo) * plot.width

    def map_y(self, val: float, plot: PlotRect, lo: float, hi: float) -> float:
        if _fuzzy_equal(hi, lo):
            return float(plot.bottom)
        return plot.bottom - (val - lo) / (hi - lo) * plot.height

    def series_max(self) -> float:
        """Largest value over all series (at least 0), with 10% headroom."""
        top = max((v for s in self.config.series for v in s.y_values), default=0.0)
        return max(top, 0.0) * 1.1

    def series_min(self) -> float:
        """Smallest value over all series (at most 0), with 10% headroom."""
        low = min((v for s in self.config.series for v in s.y_values), default=0.0)
        return min(min(low, 0.0) * 1.1, 0.0)

    @staticmethod
    def default_color(index: int) -> Color:
        return PALETTE[index % len(PALETTE)]

    def _series_color(self, index: int) -> Color:
        color = self.config.series[index].color
        return color if color is not None else self.default_color(index)

    # ---------- rendering ----------

    def to_image(self, width: int = 800, height: int = 500) -> Image.Image:
        """Render the chart into a new RGB image of the given size."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        image = Image.new("RGB", (width, height), WHITE)
        draw = ImageDraw.Draw(image, "RGBA")
        self._render(draw, max(width, self.MIN_WIDTH), max(height, self.MIN_HEIGHT))
        return image

    def export_png(self, path, width: int = 800, height: int = 500) -> None:
        """Render the chart and save it as a PNG file."""
        self.to_image(width, height).save(path, "PNG")

    def _render(self, draw, width: int, height: int) -> None:
        area = PlotRect(0, 0, width, height)
        draw.rectangle([0, 0, width - 1, height - 1], fill=self.config.background)
        plot = self.plot_area(width, height)
        self._draw_title(draw, area)
        self._draw_axes(draw, plot)
        self._draw_grid_lines(draw, plot, self.series_max())
        self._draw_chart(draw, plot)
        self._draw_legend(draw, area)

    def _draw_title(self, draw, area: PlotRect) -> None:
        if not self.config.title:
            return
        _draw_text_in(draw, (area.left, area.top + 6, area.width, 28), self.config.title, BLACK)

    def _draw_legend(self, draw, area: PlotRect) -> None:
        if self.config.legend is LegendPos.NONE or not self.config.series:
            return
        swatch, spacing, padding = 12, 8, 8
        advances = [int(draw.textlength(s.name, font=_font())) for s in self.config.series]
        total = sum(swatch + spacing + adv + padding for adv in advances)
        lx = area.center[0] - total // 2
        ly = area.bottom - 24
        for index, advance in enumerate(advances):
            _fill_rect(draw, lx, ly, swatch, swatch, self._series_color(index))
            lx += swatch + 4
            _draw_text_in(draw, (lx, ly, advance, swatch), self.config.series[index].name,
                          BLACK, halign="left")
            lx += advance + padding

    def _draw_axes(self, draw, plot: PlotRect) -> None:
        draw.line([(plot.left, plot.top), (plot.left, plot.bottom)], fill=_AXIS_COLOR)
        draw.line([(plot.left, plot.bottom), (plot.right, plot.bottom)], fill=_AXIS_COLOR)
        max_v = self.series_max()
        if max_v <= 0:
            return
        for step in range(6):
            val = max_v * step / 5.0
            y = int(self.map_y(val, plot, 0, max_v))
            _draw_text_in(draw, (0, y + 5, plot.left - 4, 14), _axis_label(val),
                          _LABEL_COLOR, halign="right")

    def _draw_grid_lines(self, draw, plot: PlotRect, y_max: float) -> None:
        if y_max <= 0:
            return
        for step in range(1, 6):
            y = int(self.map_y(y_max * step / 5.0, plot, 0, y_max))
            draw.point([(x, y) for x in range(plot.left, plot.right + 1, 2)], fill=_GRID_COLOR)

    @abstractmethod
    def _draw_chart(self, draw, plot: PlotRect) -> None:
        """Draw the series data inside ``plot``."""


class BarChart(ChartBase):
    """Grouped vertical bars, one group per category."""

    def _draw_chart(self, draw, plot: PlotRect) -> None:
        series = self.config.series
        if not series:
            return
        max_v = self.series_max()
        if max_v <= 0:
            return
        n_groups = max(len(s.y_values) for s in series)
        gap = 0.25
        group_w = plot.width / n_groups
        bar_w = group_w * (1.0 - gap) / len(series)
        first_labels = series[0].labels
        for g in range(n_groups):
            gx = plot.left + g * group_w + group_w * gap / 2.0
            for s_index, s in enumerate(series):
                if g >= len(s.y_values):
                    continue
                val = s.y_values[g]
                bx = int(gx + s_index * bar_w)
                bh = int(val / max_v * plot.height)
                by = plot.bottom - bh
                bw = int(bar_w) - 1
                _fill_rect(draw, bx, by, bw, bh, self._series_color(s_index))
                if s_index == 0 and g < len(first_labels):
                    _draw_text_in(draw, (bx, plot.bottom + 3, int(group_w), 16),
                                  first_labels[g], _LABEL_COLOR, valign="top")
                if self.config.show_data_labels:
                    _draw_text_in(draw, (bx, min(by, by + bh), bw, abs(bh)),
                                  str(int(val)), BLACK, valign="top")


class LineChart(ChartBase):
    """Each series as a polyline with a marker on every point."""

    def _draw_chart(self, draw, plot: PlotRect) -> None:
        max_v, min_v = self.series_max(), self.series_min()
        if _fuzzy_equal(max_v, min_v):
            return
        for s_index, s in enumerate(self.config.series):
            if not s.y_values:
                continue
            color = self._series_color(s_index)
            denom = max(len(s.y_values) - 1, 1)
            points = [
                (self.map_x(i / denom, plot, 0.0, 1.0), self.map_y(v, plot, min_v, max_v))
                for i, v in enumerate(s.y_values)
            ]
            if len(points) > 1:
                draw.line(points, fill=color, width=2, joint="curve")
            for x, y in points:
                draw.ellipse([x - 4, y - 4, x + 4, y + 4], fill=color, outline=color)


class PieChart(ChartBase):
    """The first series as slices with percentage labels."""

    def _draw_chart(self, draw, plot: PlotRect) -> None:
        if not self.config.series:
            return
        values = self.config.series[0].y_values
        if not values:
            return
        total = sum(abs(v) for v in values)
        if total <= 0:
            return
        cx, cy = plot.center
        r = min(plot.width, plot.height) // 2 - 10
        if r <= 0:
            return
        box = [cx - r, cy - r, cx + r - 1, cy + r - 1]
        angle = -90.0 * 16  # sixteenths of a degree, counter-clockwise
        for index, value in enumerate(values):
            span = abs(value) / total * 360.0 * 16
            start, extent = int(angle), int(span)
            draw.pieslice(box, -(start + extent) / 16.0, -start / 16.0,
                          fill=self.default_color(index), outline=WHITE, width=2)
            mid = (angle + span / 2.0) / 16.0 * math.pi / 180.0
            lx = cx + int(r * 0.65 * math.cos(mid))
            ly = cy + int(r * 0.65 * math.sin(mid))
            pct = f"{abs(value) / total * 100.0:.1f}%"
            _draw_text_in(draw, (lx - 24, ly - 8, 48, 16), pct, WHITE)
            angle += span


class ScatterChart(ChartBase):
    """Each value as a dot, placed by its x value or its position."""

    def _draw_chart(self, draw, plot: PlotRect) -> None:
        max_v, min_v = self.series_max(), self.series_min()
        if not self.config.series:
            return
        for s_index, s in enumerate(self.config.series):
            color = self._series_color(s_index)
            outline = _darker(color, 130)
            last = len(s.y_values) - 1.0
            for i, yv in enumerate(s.y_values):
                xv = s.x_values[i] if i < len(s.x_values) else float(i)
                x = self.map_x(xv, plot, 0, last)
                y = self.map_y(yv, plot, min_v, max_v)
                draw.ellipse([x - 5, y - 5, x + 5, y + 5], fill=color, outline=outline)


class AreaChart(ChartBase):
    """Each series as a translucent filled area under its line."""

    def _draw_chart(self, draw, plot: PlotRect) -> None:
        max_v, min_v = self.series_max(), self.series_min()
        for s_index, s in enumerate(self.config.series):
            if not s.y_values:
                continue
            color = self._series_color(s_index)
            n = len(s.y_values)
            denom = max(n - 1, 1)
            points = [(self.map_x(0, plot, 0, denom), float(plot.bottom))]
            points += [
                (self.map_x(i, plot, 0, denom), self.map_y(v, plot, min_v, max_v))
                for i, v in enumerate(s.y_values)
            ]
            points.append((self.map_x(n - 1, plot, 0, denom), float(plot.bottom)))
            draw.polygon(points, fill=color + (_AREA_ALPHA,))
            draw.line(points + [points[0]], fill=color, width=2)


_CHART_CLASSES: dict[ChartType, type[ChartBase]] = {
    ChartType.BAR: BarChart,
    ChartType.LINE: LineChart,
    ChartType.PIE: PieChart,
    ChartType.SCATTER: ScatterChart,
    ChartType.AREA: AreaChart,
}


def create_chart(chart_type: ChartType, config: Optional[ChartConfig] = None) -> ChartBase:
    """Create the chart class for ``chart_type``; unknown types fall back to bars."""
    return _CHART_CLASSES.get(chart_type, BarChart)(config)