"""Colour theme for dustpan's terminal output.

Colours default to the values of ThemeColors and can be overridden by
the ``[colors]`` table of ``~/.config/dustpan/theme.toml``. Every rich
style the CLI prints with is derived from one of those colours.
"""

import logging
import tomllib
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from dustpan.core.paths import get_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")]


class ThemeColors(BaseModel):
    """Hex colours (#RGB or #RRGGBB) used by the CLI."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # Sizes of 1 GB and more, 100 MB and more, and anything smaller
    size_huge: HexColor = "#f53263"
    size_large: HexColor = "#f5b332"
    size_small: HexColor = "#b2bec3"

    # Junk selection marks
    selected: HexColor = "#c1ff62"
    recommended: HexColor = "#69B9A1"


# Style name -> (colour field, extra style attributes)
STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "path": ("text", "bold"),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "size_huge": ("size_huge", "bold"),
    "size_large": ("size_large", ""),
    "size_small": ("size_small", ""),
    "selected": ("selected", ""),
    "recommended": ("recommended", ""),
}


def load_colors() -> ThemeColors:
    """Read the user's colour overrides on top of the defaults.

    A missing theme file silently gives the defaults. A file that cannot
    be read, parsed or validated is ignored as a whole with a warning.
    """
    path = get_theme_path()
    try:
        with open(path, "rb") as f:
            overrides = tomllib.load(f).get("colors", {})
        colors = ThemeColors.model_validate(overrides)
    except FileNotFoundError:
        return ThemeColors()
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return ThemeColors()
    logger.debug("Loaded theme overrides from %s", path)
    return colors


def build_theme(colors: ThemeColors | None = None) -> Theme:
    """Turn colours into the named rich styles used by the CLI."""
    if colors is None:
        colors = load_colors()
    styles: dict[str, str] = {}
    for name, (field, attributes) in STYLES.items():
        color: str = getattr(colors, field)
        styles[name] = f"{attributes} {color}" if attributes else color
    return Theme(styles)


_theme: Theme | None = None


def get_theme(*, reload: bool = False) -> Theme:
    """Return the shared rich theme, building it on first use.

    Args:
        reload: Rebuild from the theme file even if already built.
    """
    global _theme
    if _theme is None or reload:
        _theme = build_theme()
    return _theme
