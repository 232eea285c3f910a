"""SVG output for turtle polylines.

The document is assembled from small element builders: an optional title
and background, then one ``<polyline>`` per pen-down run. With ``flip_y``
the polylines sit in a group mirrored about the horizontal centre line, so
the turtle's Cartesian y axis points up in the rendered image.
"""

from __future__ import annotations

import html
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NamedTuple

from .errors import _require
from .turtle import Point

_SVG_NS = "http://www.w3.org/2000/svg"


class Bounds(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def padded(self, margin: float) -> Bounds:
        return Bounds(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )


@dataclass(frozen=True)
class SvgStyle:
    stroke: str = "#000"
    stroke_width: float = 1.0
    fill: str = "none"
    stroke_linecap: str = "round"
    stroke_linejoin: str = "round"

    def attributes(self, precision: int) -> str:
        pairs = (
            ("stroke", self.stroke),
            ("stroke-width", _num(self.stroke_width, precision)),
            ("fill", self.fill),
            ("stroke-linecap", self.stroke_linecap),
            ("stroke-linejoin", self.stroke_linejoin),
        )
        return " ".join(f'{name}="{_attr(value)}"' for name, value in pairs)


@dataclass(frozen=True)
class SvgOptions:
    margin: float = 10.0
    precision: int = 3
    flip_y: bool = True
    width: float | None = None
    height: float | None = None
    style: SvgStyle = field(default_factory=SvgStyle)
    background: str | None = None

    def __post_init__(self) -> None:
        _require(0 <= self.precision <= 10, "svg precision must be between 0 and 10")
        _require(self.margin >= 0, "svg margin must be >= 0")
        _require(self.width is None or self.width > 0, "svg width must be > 0")
        _require(self.height is None or self.height > 0, "svg height must be > 0")

    @property
    def has_background(self) -> bool:
        return bool(self.background) and self.background.lower() != "none"


def compute_bounds(polylines: Iterable[Iterable[Point]]) -> Bounds:
    """Axis-aligned box around every point; raises if there are none."""
    xs: list[float] = []
    ys: list[float] = []
    for line in polylines:
        for x, y in line:
            xs.append(x)
            ys.append(y)
    _require(bool(xs), "No drawable geometry produced.")
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def _num(value: float, precision: int) -> str:
    """Fixed-point number without trailing zeros; never "-0"."""
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _root_open(box: Bounds, options: SvgOptions) -> str:
    p = options.precision
    view_box = " ".join(_num(v, p) for v in (box.min_x, box.min_y, box.width, box.height))
    size = ""
    if options.width:
        size += f' width="{_num(options.width, p)}"'
    if options.height:
        size += f' height="{_num(options.height, p)}"'
    return f'<svg xmlns="{_SVG_NS}" version="1.1" viewBox="{view_box}"{size}>'


def _background(box: Bounds, options: SvgOptions) -> str:
    p = options.precision
    return (
        f'<rect x="{_num(box.min_x, p)}" y="{_num(box.min_y, p)}" '
        f'width="{_num(box.width, p)}" height="{_num(box.height, p)}" '
        f'fill="{_attr(options.background or "")}" />'
    )


def _polyline(points: Iterable[Point], style_attrs: str, precision: int) -> str:
    coords = " ".join(f"{_num(x, precision)},{_num(y, precision)}" for x, y in points)
    return f'<polyline points="{coords}" {style_attrs} />'


def render_svg(
    polylines: list[list[Point]], options: SvgOptions, *, title: str | None = None
) -> str:
    # Pad before the degeneracy check so a single straight line still renders.
    box = compute_bounds(polylines).padded(options.margin)
    _require(
        box.width > 0 and box.height > 0,
        "Degenerate bounds after margin (width or height is zero). "
        "Use a margin > 0 to render collinear or single-point geometry.",
    )
    p = options.precision

    out = ['<?xml version="1.0" encoding="UTF-8"?>', _root_open(box, options)]
    if title:
        out.append(f"  <title>{html.escape(title, quote=False)}</title>")
    if options.has_background:
        out.append("  " + _background(box, options))

    style_attrs = options.style.attributes(p)
    body = [_polyline(line, style_attrs, p) for line in polylines]
    if options.flip_y:
        out.append(
            f'  <g transform="translate(0,{_num(box.min_y + box.max_y, p)}) scale(1,-1)">'
        )
        out.extend("    " + element for element in body)
        out.append("  </g>")
    else:
        out.extend("  " + element for element in body)
    out.append("</svg>")
    return "\n".join(out) + "\n"


def write_svg(
    polylines: list[list[Point]],
    out_path: str,
    options: SvgOptions,
    *,
    title: str | None = None,
) -> None:
    content = render_svg(polylines, options, title=title)
    parent = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(parent, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(content)
