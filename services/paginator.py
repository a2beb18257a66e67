"""Paginator - lay plain text out as pages of wrapped lines.

Pure layout pass: wrap greedily, then walk the lines with a vertical
cursor and start a new page whenever the cursor has passed the bottom
bound. Lines never move back to an earlier page.
"""

import math
from collections.abc import Callable

from reportlab.pdfbase.pdfmetrics import stringWidth

from .models import Page, PageGeometry

Measure = Callable[[str], float]

TAB_SIZE = 4


def font_measure(font_name: str, font_size: float) -> Measure:
    """Width of a string set in the given font, in points."""

    def measure(text: str) -> float:
        return stringWidth(text, font_name, font_size)

    return measure


def wrap_text(text: str, max_width: float, measure: Measure) -> list[str]:
    """Greedy word-wrap so no line is wider than ``max_width``.

    Hard line breaks are kept (blank lines survive as empty lines). A word
    wider than a whole line is split across lines by characters. Empty
    text wraps to no lines at all.
    """
    if not text:
        return []

    lines: list[str] = []
    for paragraph in text.expandtabs(TAB_SIZE).splitlines():
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
            if measure(word) <= max_width:
                current = word
            else:
                pieces = _split_word(word, max_width, measure)
                lines.extend(pieces[:-1])
                current = pieces[-1]
        lines.append(current)

    return lines


def _split_word(word: str, max_width: float, measure: Measure) -> list[str]:
    """Break an overlong word into chunks that each fit the line width."""
    pieces: list[str] = []
    chunk = ""
    for char in word:
        if chunk and measure(chunk + char) > max_width:
            pieces.append(chunk)
            chunk = char
        else:
            chunk += char
    pieces.append(chunk)
    return pieces


def paginate(
    text: str,
    geometry: PageGeometry | None = None,
    measure: Measure | None = None,
) -> list[Page]:
    """Split text into pages of wrapped lines.

    Args:
        text: Plain text to lay out.
        geometry: Page geometry; defaults to A4 with the standard export margins.
        measure: Width function in the same units as the geometry. Defaults
            to the geometry's font metrics.

    Returns:
        Pages in order. Always at least one page; empty text gives one empty page.
    """
    geometry = geometry or PageGeometry()
    measure = measure or font_measure(geometry.font_name, geometry.font_size)

    pages: list[Page] = []
    current: list[str] = []
    cursor = geometry.margin_top

    for line in wrap_text(text or "", geometry.max_line_width, measure):
        if current and cursor > geometry.bottom_bound:
            pages.append(Page(number=len(pages) + 1, lines=tuple(current)))
            current = []
            cursor = geometry.margin_top
        current.append(line)
        cursor += geometry.line_height

    pages.append(Page(number=len(pages) + 1, lines=tuple(current)))
    return pages


def lines_per_page(geometry: PageGeometry) -> int:
    """Number of lines a page holds before the cursor passes the bottom bound."""
    if geometry.line_height <= 0:
        raise ValueError("line_height must be positive")
    if geometry.bottom_bound < geometry.margin_top:
        return 1
    return math.floor((geometry.bottom_bound - geometry.margin_top) / geometry.line_height) + 1


def line_positions(page: Page, geometry: PageGeometry) -> list[tuple[float, str]]:
    """Cursor position (distance from the top edge) of each line on a page."""
    return [
        (geometry.margin_top + index * geometry.line_height, line)
        for index, line in enumerate(page.lines)
    ]
