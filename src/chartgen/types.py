"""Type aliases used across the chartgen package."""

from typing import Literal, Tuple

# Color types
RGBColor = Tuple[float, float, float]  # RGB color in 0-1 range

# Chart orientation: horizontal means the X axis runs horizontally
Orientation = Literal["horizontal", "vertical"]

# Edge of the chart the legend is docked to
LegendPosition = Literal["top", "bottom", "left", "right"]

# Rendering kind of a series
SeriesKind = Literal["line", "bar", "circular"]

# Line series styling
LineStyle = Literal["none", "solid", "dash", "dot", "dashdot"]
SymbolType = Literal[
    "none", "circle", "square", "diamond", "triangle", "inverted_triangle", "cross", "plus"
]

# Deployment target; "web" cannot print or render offscreen
RenderTarget = Literal["pdf", "image", "web"]
