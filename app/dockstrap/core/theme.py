"""Console styles for installer output.

Every markup tag the CLI prints (``[step]``, ``[pinned]``, ``[muted]`` ...)
is a role defined here. The palette is fixed; Rich honours ``NO_COLOR``
and plain-file output on its own.
"""

from functools import cache

from rich.theme import Theme

STYLES: dict[str, str] = {
    # Tables
    "text": "#ffffff",
    "muted": "#b2bec3",
    "header": "#69B9A1",
    "bold_header": "bold #69B9A1",
    "border": "#29526d",
    # Messages
    "info": "#0ec1c8",
    "success": "#03b971",
    "warning": "#f5b332",
    "error": "bold #f53263",
    "step": "bold #0e8ac8",
    # Package version in the summary
    "pinned": "#c1ff62",
    "unpinned": "#faf870",
}


@cache
def get_theme() -> Theme:
    """Return the Rich theme shared by both consoles."""
    return Theme(STYLES)
