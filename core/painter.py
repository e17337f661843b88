"""Rich markup helpers for report text."""

from __future__ import annotations

from rich.markup import escape
from rich.text import Text


def paint(text: str, style: str) -> str:
    """Wrap escaped text in a rich markup style tag."""

    if not style:
        return escape(text)
    return f"[{style}]{escape(text)}[/{style}]"


def plain(text: str) -> str:
    """Escape text so rich renders it verbatim."""

    return escape(text)


def strip_markup(markup: str) -> str:
    """Return the plain text a markup string renders to."""

    return Text.from_markup(markup).plain
