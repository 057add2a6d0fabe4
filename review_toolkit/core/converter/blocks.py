from __future__ import annotations

"""Converters for structural blocks: bulleted/numbered lists and tables."""

from typing import List
import logging

from lxml import etree as ET  # type: ignore

from review_toolkit.core.converter.inline import render_inline
from review_toolkit.core.models import ConversionContext
from review_toolkit.core.parser.odt_utils import OdtDocument
from review_toolkit.core.utils import parse_length

logger = logging.getLogger(__name__)

__all__ = [
    "ListLevels",
    "bullet_list_to_text",
    "number_list_to_text",
    "table_to_text",
    "render_cell",
]

BULLET_MARKER = "*"
EMPTY_CELL = "."


class ListLevels:
    """Registry of left margins seen in one list, mapping margins to depths.

    Nesting is inferred from indentation, not from list structure: a margin
    no larger than a registered one maps to that entry's index (first match
    wins); a larger margin is registered as a new, deeper level. The
    registry starts with the zero margin.
    """

    def __init__(self) -> None:
        self.margins: List[float] = [0.0]

    def level_for(self, margin: float) -> int:
        if not margin:
            return 0
        for index, known in enumerate(self.margins):
            # A margin smaller than every registered value also lands here
            # (index 0); documents rely on that fallback.
            if margin <= known:
                return index
        self.margins.append(margin)
        return len(self.margins) - 1


def list_level(doc: OdtDocument, item: ET._Element, levels: ListLevels) -> int:
    margin = parse_length(doc.style_properties(item).get("fo:margin-left"))
    return levels.level_for(margin)


def bullet_list_to_text(doc: OdtDocument, list_element: ET._Element, context: ConversionContext) -> str:
    """Render a bulleted list, one `` * item`` line per list item."""
    levels = ListLevels()
    lines: List[str] = []
    for item in doc.list_items(list_element):
        depth = list_level(doc, item, levels) + 1
        lines.append(f" {BULLET_MARKER * depth} {render_inline(doc, item, context)}\n")
    return "".join(lines)


def number_list_to_text(doc: OdtDocument, list_element: ET._Element, context: ConversionContext) -> str:
    """Render a numbered list as `` 1. item`` lines.

    Numbered lists are never nested in Re:VIEW output; indentation is
    ignored.
    """
    lines: List[str] = []
    for number, item in enumerate(doc.list_items(list_element), start=1):
        lines.append(f" {number}. {render_inline(doc, item, context)}\n")
    return "".join(lines)


def render_cell(doc: OdtDocument, cell, context: ConversionContext) -> str:
    """Render one table cell's first paragraph.

    Empty cells become ``.``; a leading literal ``.`` is doubled so it
    cannot be mistaken for the empty-cell placeholder.
    """
    text = render_inline(doc, doc.cell_paragraph(cell), context)
    if not text:
        return EMPTY_CELL
    if text.startswith("."):
        return "." + text
    return text


def table_to_text(doc: OdtDocument, table: ET._Element, context: ConversionContext) -> str:
    """Render a table as a ``//table[name][]{ … //}`` block.

    When the first cell of the first row is empty, that row is treated as a
    header and followed by a dashed separator line.
    """
    name = doc.table_name(table)
    lines = [f"//table[{name}][]{{\n"]
    separator = "-" * context.settings.table_separator_width

    for index, row in enumerate(doc.table_rows(table)):
        cells = [render_cell(doc, cell, context) for cell in row]
        lines.append("\t".join(cells) + "\n")
        if index == 0 and cells and cells[0] == EMPTY_CELL:
            lines.append(separator + "\n")

    lines.append("//}\n")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Table %r: %d lines", name, len(lines) - 2)
    return "".join(lines)
