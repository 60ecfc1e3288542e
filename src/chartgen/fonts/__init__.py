"""Font handles, registration and lookup."""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from chartgen.fonts.google import get_google_font

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).parent

# Registered TTF name -> file path, needed by the raster renderer
_FONT_PATHS: dict[str, Path] = {}

# Standard PDF fonts: family -> (regular, bold, italic, bold italic)
_BUILTIN_FACES: dict[str, tuple[str, str, str, str]] = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


@dataclass
class Font:
    """
    A font handle.

    Handles can be disposed by their owner; setters reject disposed handles
    instead of silently drawing with a stale face.
    """

    family: str = "Helvetica"
    size: float = 8.0
    bold: bool = False
    italic: bool = False
    _disposed: bool = field(default=False, repr=False, compare=False)

    @property
    def face_name(self) -> str:
        """Name of the concrete face registered with ReportLab."""
        faces = _BUILTIN_FACES.get(self.family)
        index = (2 if self.italic else 0) + (1 if self.bold else 0)
        if faces:
            return faces[index]
        if index == 0:
            return self.family
        suffix = ("", "Bold", "Italic", "BoldItalic")[index]
        candidate = f"{self.family}-{suffix}"
        return candidate if is_registered(candidate) else self.family

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        self._disposed = True

    def derive(self, **changes) -> "Font":
        """Create a new, live handle with some attributes changed."""
        return replace(self, _disposed=False, **changes)


def _normalize_font_name(name: str) -> str:
    """
    Normalize a font name to TitleCase convention.

    Examples:
        "roboto-mono" → "Roboto-Mono"
        "helvetica" → "Helvetica"
    """
    parts = name.split('-')
    return '-'.join(part.title() for part in parts)


def is_registered(font_name: str) -> bool:
    """Whether ReportLab knows the font (built-in or registered TTF)."""
    try:
        pdfmetrics.getFont(font_name)
        return True
    except KeyError:
        return False


def register_fonts(directory: Path = FONTS_DIR) -> int:
    """
    Register every TTF file in a directory with ReportLab.

    Fonts are registered under the TitleCase form of their file stem, so
    ``open-sans-bold.ttf`` becomes ``Open-Sans-Bold``.

    Args:
        directory: Directory to scan (default: the package fonts directory).

    Returns:
        Number of fonts registered.
    """
    ttf_files = sorted(directory.glob("*.ttf"))
    if not ttf_files:
        logger.debug(f"No TTF font files found in {directory}, using built-in PDF fonts")
        return 0

    registered_count = 0
    for font_path in ttf_files:
        font_name = _normalize_font_name(font_path.stem)
        try:
            pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        except Exception as e:
            # ReportLab raises TTFError and assorted struct errors for bad files
            logger.warning(f"Failed to register font {font_name} from {font_path.name}: {e}")
            continue
        _FONT_PATHS[font_name] = font_path
        logger.info(f"Registered font: {font_name} from {font_path.name}")
        registered_count += 1

    return registered_count


def resolve_font(font_spec: str, fallback: str = "Helvetica") -> str:
    """
    Resolve a font specification to a registered font family name.

    Resolution priority:
    1. Already registered (TTF fonts or PDF built-ins)
    2. Google Fonts, when a weight is given ("roboto:700")
    3. The fallback family

    Args:
        font_spec: Case-insensitive family, optionally with ":weight".
        fallback: Family used when nothing else resolves.

    Returns:
        A family name usable in Font(family=...).
    """
    weight: int | None = None
    family = font_spec.strip()
    if ":" in family:
        family, weight_str = (part.strip() for part in family.split(":", 1))
        try:
            weight = int(weight_str)
        except ValueError:
            logger.warning(f"Invalid font weight '{weight_str}' in '{font_spec}', ignoring it")

    if family in _BUILTIN_FACES:
        return family
    font_name = _normalize_font_name(family)
    if font_name in _BUILTIN_FACES or is_registered(font_name):
        return font_name

    if weight is not None:
        result = register_google_font(family, weight)
        if result:
            return result
        logger.warning(f"Could not download '{family}' from Google Fonts")

    logger.info(f"Using fallback font '{fallback}' for '{font_spec}'")
    return fallback


def register_google_font(family: str, weight: int = 400) -> Optional[str]:
    """
    Download and register a Google Font with ReportLab.

    Returns:
        Registered font name (e.g. "Roboto-700"), or None on failure.
    """
    font_name = f"{_normalize_font_name(family.replace(' ', ''))}-{weight}"
    if is_registered(font_name):
        return font_name

    font_path = get_google_font(family, weight)
    if not font_path:
        return None

    try:
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
    except Exception as e:
        logger.error(f"Failed to register Google Font {font_name}: {e}")
        return None
    _FONT_PATHS[font_name] = font_path
    logger.info(f"Registered Google Font: {font_name}")
    return font_name


def get_font_path(font_name: str) -> Optional[Path]:
    """
    Get the file path for a registered font.

    PDF built-in fonts (Helvetica, Courier, ...) have no path.
    """
    return _FONT_PATHS.get(font_name)
