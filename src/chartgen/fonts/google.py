"""Google Fonts downloader with a local cache."""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CACHE_DIR = Path.home() / ".cache" / "chartgen" / "fonts"

# CSS API v1 still serves TrueType files, which ReportLab can embed
CSS_URL = "https://fonts.googleapis.com/css?family={family}:{weight}&display=swap"

_SRC_TTF = re.compile(r"src:\s*url\((https://[^)]+\.ttf)\)")
_ANY_TTF = re.compile(r"(https://[^\s'\"]+\.ttf)")


def cache_path_for(family: str, weight: int, cache_dir: Path = CACHE_DIR) -> Path:
    return cache_dir / f"{family.replace(' ', '')}-{weight}.ttf"


def get_google_font(family: str, weight: int = 400, cache_dir: Path = CACHE_DIR) -> Optional[Path]:
    """
    Return the cached TTF for a Google Font, downloading it on first use.

    Args:
        family: Font family name (e.g., "Roboto").
        weight: Font weight (e.g., 400 regular, 700 bold).
        cache_dir: Where downloaded files are kept.

    Returns:
        Path to the TTF file, or None if it could not be fetched.
    """
    cache_path = cache_path_for(family, weight, cache_dir)
    if cache_path.exists():
        logger.debug(f"Using cached Google Font: {cache_path.name}")
        return cache_path

    try:
        logger.info(f"Downloading Google Font: {family} (weight {weight})")
        css = requests.get(CSS_URL.format(family=family.replace(" ", "+"), weight=weight), timeout=10)
        css.raise_for_status()

        font_url = extract_font_url(css.text)
        if not font_url:
            logger.error(f"No TrueType source in Google Fonts CSS for {family}")
            return None

        font = requests.get(font_url, timeout=30)
        font.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to download Google Font {family} (weight {weight}): {e}")
        return None

    cache_dir.mkdir(parents=True, exist_ok=True)
    cache_path.write_bytes(font.content)
    logger.info(f"Cached Google Font: {cache_path.name}")
    return cache_path


def extract_font_url(css_content: str) -> Optional[str]:
    """Pull the first TrueType URL out of an @font-face stylesheet."""
    match = _SRC_TTF.search(css_content) or _ANY_TTF.search(css_content)
    return match.group(1) if match else None
