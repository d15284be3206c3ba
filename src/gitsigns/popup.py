"""Popup layout for the editor rendering sink.

The editor owns buffers and windows. This module only prepares what it
needs: the text lines and a :class:`PopupLayout` describing where and how
large the floating window should be. The handle the sink returns is passed
back to the caller untouched.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol, TypeVar

from gitsigns.constants import DEFAULT_TABSTOP
from gitsigns.models import BlameRecord

__all__ = [
    "PopupLayout",
    "RenderSink",
    "build_layout",
    "calc_width",
    "create_popup",
    "display_width",
    "format_blame",
]

H = TypeVar("H")
H_co = TypeVar("H_co", covariant=True)


@dataclass(frozen=True, slots=True)
class PopupLayout:
    """Placement hints for a floating window.

    Attributes:
        relative: Anchor the row/col offsets are relative to (e.g. "cursor").
        row: Row offset from the anchor.
        col: Column offset from the anchor.
        height: Window height in lines.
        width: Window width in display columns.
        highlight: Highlight group for the window background, if any.
        tabstop: Tab width for the popup buffer, if it should differ.
    """

    relative: str = "cursor"
    row: int = 0
    col: int = 0
    height: int = 1
    width: int = 1
    highlight: str | None = None
    tabstop: int | None = None


class RenderSink(Protocol[H_co]):
    """Editor-side surface that shows pre-rendered popup text."""

    def open_window(self, lines: list[str], layout: PopupLayout) -> H_co:
        """Show ``lines`` in a floating window and return its handle."""
        ...


def display_width(text: str, tabstop: int = DEFAULT_TABSTOP) -> int:
    """Number of terminal columns ``text`` occupies.

    East Asian wide and fullwidth characters take two columns; combining
    marks take none. A tab advances to the next multiple of ``tabstop``.
    """
    width = 0
    for char in text:
        if char == "\t":
            width += tabstop - width % tabstop
        elif unicodedata.combining(char):
            continue
        else:
            width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def calc_width(lines: list[str], tabstop: int = DEFAULT_TABSTOP) -> int:
    return max((display_width(line, tabstop) for line in lines), default=0)


def build_layout(lines: list[str], **opts: Any) -> PopupLayout:
    """Fill in a layout, sizing the window to fit ``lines``.

    Height defaults to the line count and width to the widest line, with
    tabs expanded to the requested ``tabstop``.
    """
    width = calc_width(lines, opts.get("tabstop") or DEFAULT_TABSTOP)
    layout = PopupLayout(height=max(len(lines), 1), width=max(width, 1))
    overrides = {k: v for k, v in opts.items() if v is not None}
    return replace(layout, **overrides)


def create_popup(sink: RenderSink[H], lines: list[str], **opts: Any) -> H:
    """Open a popup through ``sink`` and return the sink's window handle."""
    return sink.open_window(lines, build_layout(lines, **opts))


def _format_time(epoch: int | None, tz: str | None) -> str:
    if epoch is None:
        return "unknown date"
    offset = timezone.utc
    if tz and len(tz) == 5 and tz[0] in "+-" and tz[1:].isdigit():
        minutes = int(tz[1:3]) * 60 + int(tz[3:5])
        offset = timezone(timedelta(minutes=-minutes if tz[0] == "-" else minutes))
    return datetime.fromtimestamp(epoch, offset).strftime("%Y-%m-%d %H:%M")


def format_blame(record: BlameRecord) -> list[str]:
    """Render a blame record as popup lines."""
    if record.is_uncommitted:
        return [f"{record.abbrev_sha} Not Committed Yet"]
    date = _format_time(record.author_time, record.author_tz)
    return [
        f"{record.abbrev_sha} {record.author or 'unknown'} ({date}):",
        record.summary or "",
    ]
