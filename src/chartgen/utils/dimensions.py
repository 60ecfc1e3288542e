"""Layout geometry and page size utilities."""

from dataclasses import dataclass as _dataclass

from chartgen.errors import InvalidArgumentError


@_dataclass(frozen=True)
class PageSize:
    """Page size specification."""

    width: float   # inches
    height: float  # inches
    label: str     # display label for CLI/help


# Registry of standard page sizes
PAGE_SIZES = {
    "letter": PageSize(8.5, 11.0, "Letter (8.5×11)"),
    "half": PageSize(8.5, 5.5, "Half Sheet (8.5×5.5)"),
    "a4": PageSize(8.27, 11.69, "A4 (210×297mm)"),
    "a5": PageSize(5.83, 8.27, "A5 (148×210mm)"),
}


def get_page_size(name: str) -> PageSize:
    """
    Get page size by name.

    Args:
        name: Page size name (e.g., "letter", "half", "a4").

    Returns:
        PageSize object. Defaults to letter if name not found.
    """
    return PAGE_SIZES.get(name.lower(), PAGE_SIZES["letter"])


@_dataclass(frozen=True)
class Size:
    """A (width, height) footprint in device units."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidArgumentError(f"Size must be non-negative, got {self.width}x{self.height}")


ZERO_SIZE = Size(0, 0)


@_dataclass(frozen=True)
class LayoutBox:
    """
    Rectangle in device units.

    The origin is the top-left corner of the owning region's coordinate space
    and y grows downwards.
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidArgumentError(
                f"LayoutBox must have non-negative extent, got {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def intersects(self, other: "LayoutBox") -> bool:
        """Whether the two boxes share interior area (touching edges do not count)."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


EMPTY_BOX = LayoutBox(0, 0, 0, 0)


def inches_to_points(inches: float) -> float:
    """
    Convert inches to points (72 points per inch).

    Args:
        inches: Measurement in inches.

    Returns:
        Measurement in points.
    """
    return inches * 72

