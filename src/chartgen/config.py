"""Configuration loading and validation."""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chartgen.fonts import Font, resolve_font
from chartgen.types import LegendPosition, LineStyle, Orientation, RenderTarget, RGBColor, SeriesKind, SymbolType

logger = logging.getLogger(__name__)

DEFAULT_LEGEND_POSITION: LegendPosition = "bottom"
LEGEND_POSITIONS: tuple[str, ...] = ("top", "bottom", "left", "right")
ORIENTATIONS: tuple[str, ...] = ("horizontal", "vertical")

# Matplotlib's tab10, as 0-1 RGB
DEFAULT_PALETTE: list[RGBColor] = [
    (0.122, 0.467, 0.706),
    (1.000, 0.498, 0.055),
    (0.173, 0.627, 0.173),
    (0.839, 0.153, 0.157),
    (0.580, 0.404, 0.741),
    (0.549, 0.337, 0.294),
    (0.890, 0.467, 0.761),
    (0.498, 0.498, 0.498),
    (0.737, 0.741, 0.133),
    (0.090, 0.745, 0.812),
]


def normalize_legend_position(value: Any) -> LegendPosition:
    """Map anything that is not a known edge to the default position."""
    if isinstance(value, str) and value.strip().lower() in LEGEND_POSITIONS:
        return value.strip().lower()  # type: ignore[return-value]
    logger.warning(f"Unknown legend position {value!r}, using '{DEFAULT_LEGEND_POSITION}'")
    return DEFAULT_LEGEND_POSITION


class FontConfig(BaseModel):
    """Font settings; turned into a live Font handle with to_font()."""

    family: str = "Helvetica"
    """Family name, or "family:weight" to fetch a Google Font."""

    size: float = 8.0
    """Size in device units (points)."""

    bold: bool = False
    italic: bool = False

    def to_font(self) -> Font:
        return Font(family=resolve_font(self.family), size=self.size, bold=self.bold, italic=self.italic)


class ChartTheme(BaseModel):
    """
    Visual defaults for every region.

    These are the values used whenever a setter receives None:

        theme = ChartTheme()
        dark = theme.model_copy(update={"chart_background": (0.1, 0.1, 0.1)})
    """

    # ========================================================================
    # Fonts
    # ========================================================================
    title_font: FontConfig = Field(default_factory=lambda: FontConfig(size=14.0, bold=True))
    """Default title font: Helvetica 14pt bold."""

    legend_font: FontConfig = Field(default_factory=lambda: FontConfig(size=8.0))
    """Default legend font: Helvetica 8pt regular."""

    # ========================================================================
    # Colors
    # ========================================================================
    title_foreground: RGBColor = (0.0, 0.0, 1.0)
    """Title text color. Default: blue."""

    legend_foreground: RGBColor = (0.0, 0.0, 0.0)
    """Legend text color. Default: black."""

    legend_background: RGBColor = (1.0, 1.0, 1.0)
    """Legend fill color. Default: white."""

    legend_frame: RGBColor = (0.5, 0.5, 0.5)
    """Legend border color. Default: gray."""

    chart_background: RGBColor = (1.0, 1.0, 1.0)
    """Background behind all regions. Default: white."""

    plot_background: RGBColor = (1.0, 1.0, 1.0)
    """Plot area fill color. Default: white."""

    palette: list[RGBColor] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    """Colors handed to series that do not set one, by registration index."""

    def palette_color(self, index: int) -> RGBColor:
        return self.palette[index % len(self.palette)] if self.palette else (0.0, 0.0, 0.0)


class TitleConfig(BaseModel):
    """Chart title settings."""

    text: str = ""
    visible: bool = True
    vertical: bool = False
    """Draw the title rotated, reading bottom-to-top, docked to the left edge."""


class LegendConfig(BaseModel):
    """Legend settings."""

    visible: bool = True
    position: LegendPosition = DEFAULT_LEGEND_POSITION
    extended: bool = False
    """Append current/min/avg/max columns to each entry."""

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> LegendPosition:
        return normalize_legend_position(value)


class ChartConfig(BaseModel):
    """Chart-wide settings."""

    width: float = Field(default=640.0, ge=0)
    height: float = Field(default=480.0, ge=0)
    orientation: Orientation = "horizontal"
    target: RenderTarget = "pdf"
    """Deployment target; the "web" target cannot print or render offscreen."""

    use_multipliers: bool = True
    """Show extended legend values with K/M/G/T multipliers."""

    theme: ChartTheme = Field(default_factory=ChartTheme)
    title: TitleConfig = Field(default_factory=TitleConfig)
    legend: LegendConfig = Field(default_factory=LegendConfig)

    @field_validator("orientation", mode="before")
    @classmethod
    def _normalize_orientation(cls, value: Any) -> Orientation:
        if isinstance(value, str) and value.strip().lower() in ORIENTATIONS:
            return value.strip().lower()  # type: ignore[return-value]
        logger.warning(f"Unknown orientation {value!r}, using 'horizontal'")
        return "horizontal"


class SeriesConfig(BaseModel):
    """One series as written in a chart document."""

    id: str
    description: str | None = None
    kind: SeriesKind = "line"
    x_axis: int = 0
    visible_in_legend: bool = True
    stack: bool = False
    values: list[float] = Field(default_factory=list)
    color: RGBColor | None = None
    line_style: LineStyle = "solid"
    symbol: SymbolType = "circle"
    labels: list[str] | None = None
    """Sub-labels of a circular series, one legend entry each."""

    colors: list[RGBColor] | None = None
    """Colors matching `labels`; missing entries come from the palette."""


class ChartDocument(BaseModel):
    """A chart plus its data, as loaded from TOML."""

    chart: ChartConfig = Field(default_factory=ChartConfig)
    axes: dict[int, bool] = Field(default_factory=dict)
    """X-axis id -> whether the axis has categorical values."""

    series: list[SeriesConfig] = Field(default_factory=list)


def _read_toml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Path | None = None) -> ChartConfig:
    """
    Load chart configuration from a TOML file.

    The file holds the ChartConfig fields at top level, with [theme],
    [title] and [legend] tables.

    Args:
        config_path: Path to config file. If None, looks for chart.toml in current directory.

    Returns:
        Validated ChartConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "chart.toml"
    return ChartConfig(**_read_toml(config_path))


def load_document(document_path: Path) -> ChartDocument:
    """
    Load a chart document (a [chart] table, [axes] and [[series]]) from TOML.

    TOML keys are strings, so axis ids are coerced to integers by validation.
    """
    return ChartDocument(**_read_toml(document_path))

