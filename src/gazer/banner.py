"""Startup banner — status output for ``gazer serve``.

Written to stderr so it never mixes with anything a wrapper reads from
stdout.  Styling is dropped when ``NO_COLOR`` is set, ``TERM`` is ``dumb``,
or stderr is not a terminal.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from gazer.i18n import t

if TYPE_CHECKING:
    from gazer.config import GazerConfig

_SGR = {"bold": "1", "dim": "2", "green": "32", "yellow": "33", "cyan": "36"}


def _use_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, *styles: str, color: bool) -> str:
    """Wrap *text* in SGR codes for *styles* when *color* is on."""
    if not color or not styles:
        return text
    codes = ";".join(_SGR[s] for s in styles)
    return f"\033[{codes}m{text}\033[0m"


def _link(url: str, *, color: bool) -> str:
    """OSC 8 hyperlink around *url*; plain text without color support."""
    if not color:
        return url
    return f"\033]8;;{url}\033\\{_paint(url, 'bold', 'cyan', color=True)}\033]8;;\033\\"


def print_banner(
    config: GazerConfig,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the viewer URL, live-update endpoint and editor to stderr.

    Args:
        config: Resolved GazerConfig.
        load_ms: Startup time; omitted when zero.
        warnings: Extra lines shown with a ``!`` marker.

    """
    from gazer import __version__

    color = _use_color()
    title = f"{_paint('Gazer', 'bold', color=color)} {_paint('v' + __version__, 'dim', color=color)}"
    if load_ms > 0:
        title += " " + _paint(f"({load_ms:.0f}ms)", "dim", color=color)

    websocket = t("banner.websocket").format(url=config.websocket_url)
    editor = t("banner.editor").format(editor=config.editor)
    lines = [
        "",
        f"  {title}",
        f"  {_paint('─' * 43, 'dim', color=color)}",
        f"  {_paint('├─', 'dim', color=color)} {_paint('live', 'green', color=color)} {websocket}",
        f"  {_paint('└─', 'dim', color=color)} {editor}",
        "",
        f"  {t('banner.viewer')}: {_link(config.http_url, color=color)}",
        "",
        f"  {_paint(t('banner.usage').format(), 'dim', color=color)}",
    ]
    if warnings:
        lines.append("")
        lines.extend(f"  {_paint('!', 'yellow', color=color)} {w}" for w in warnings)
    lines.append("")

    print("\n".join(lines), file=sys.stderr)
