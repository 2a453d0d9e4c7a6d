"""Terminal output for the serving banner.

Respects TTY detection: no ANSI codes when piped or redirected.

Example output (with color, URL in bold green)::

    http://localhost:10001 -> /home/me/app/dist
    http://localhost:10001 -> /home/me/app/public

"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from bundleserve.config import ServeConfig


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stdout
    try:
        return s.isatty()  # type: ignore[union-attr]
    except Exception:
        return False


class _Palette:
    """ANSI escape sequences, empty strings when color is disabled."""

    __slots__ = ("bold", "green", "reset")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[39m\033[22m"
            self.bold = "\033[1m"
            self.green = "\033[32m"
        else:
            self.reset = ""
            self.bold = ""
            self.green = ""


def format_banner(
    config: ServeConfig,
    *,
    url: str | None = None,
    color: bool | None = None,
) -> str:
    """One ``<url> -> <absolute root>`` line per content root.

    Args:
        config: The configuration being served.
        url: The listening URL.  Defaults to ``config.url``.
        color: Force color on/off.  ``None`` auto-detects from stdout.

    Returns:
        Multi-line string ready for ``sys.stdout.write()``.
    """
    use = color if color is not None else _use_color()
    c = _Palette(enabled=use)
    shown = f"{c.bold}{c.green}{url or config.url}{c.reset}"
    return "".join(f"{shown} -> {root}\n" for root in config.resolved_roots)


def print_banner(
    config: ServeConfig,
    stream: TextIO | None = None,
    *,
    url: str | None = None,
) -> None:
    """Write the serving banner to *stream* (stdout by default)."""
    out = stream or sys.stdout
    out.write(format_banner(config, url=url, color=_use_color(out)))
    out.flush()
