from __future__ import annotations

"""ODT → Re:VIEW conversion implementation.

Walks the top-level blocks of an :class:`OdtDocument` in order, classifies
each one by its paragraph style and writes the corresponding Re:VIEW lines
to a text stream.
"""

from pathlib import Path
from typing import Optional, TextIO
import logging

from lxml import etree as ET  # type: ignore

from review_toolkit.core.converter.blocks import (
    bullet_list_to_text,
    number_list_to_text,
    table_to_text,
)
from review_toolkit.core.converter.inline import process_frame, render_inline
from review_toolkit.core.converter.region import REGION_KINDS, region_line, transition
from review_toolkit.core.exceptions import OutputFileError
from review_toolkit.core.models import ConversionContext
from review_toolkit.core.parser.odt_utils import OdtDocument, qn
from review_toolkit.core.parser.style_analyzer import BlockClass, BlockKind, ListKind, classify_block
from review_toolkit.core.utils import heading_marker

logger = logging.getLogger(__name__)

__all__ = ["convert_odt_to_review", "walk_document", "classify", "render_block"]


def classify(doc: OdtDocument, element: ET._Element, context: ConversionContext) -> BlockClass:
    """Classify one top-level block of *doc*."""
    style_name = doc.style_name(element)
    list_kind: Optional[ListKind] = None
    if element.tag == qn("text:list"):
        list_kind = ListKind.BULLET if doc.is_bullet_list(style_name) else ListKind.NUMBER
    return classify_block(element.tag, style_name, context.style_rules, list_kind)


def render_block(doc: OdtDocument, element: ET._Element, block: BlockClass,
                 context: ConversionContext) -> str:
    """Return the Re:VIEW text for one classified block (markers excluded)."""
    kind = block.kind
    if kind is BlockKind.LIST:
        if block.list_kind is ListKind.NUMBER:
            return number_list_to_text(doc, element, context)
        return bullet_list_to_text(doc, element, context)
    if kind is BlockKind.TABLE:
        return table_to_text(doc, element, context)
    if kind is BlockKind.IMAGE:
        # Page-anchored frame: rendered like a frame inside a paragraph.
        line = process_frame(doc, element, context)
        return line + "\n" if line else ""

    text = render_inline(doc, element, context)
    if kind is BlockKind.TITLE:
        return f"= {text}\n"
    if kind is BlockKind.SUBTITLE:
        # //subtitle is a custom block tag known to the project's renderer
        return f"//subtitle{{\n{text}\n//}}\n"
    if kind is BlockKind.HEADING:
        if not text:
            return ""
        return f"{heading_marker(block.level)} {text}\n\n"
    if kind in REGION_KINDS:
        return region_line(REGION_KINDS[kind], text)
    if kind is BlockKind.BODY:
        return f"{text}\n\n"
    return f"<<{block.style_name}>>{text}\n"


def walk_document(doc: OdtDocument, out: TextIO, context: ConversionContext) -> ConversionContext:
    """Write the Re:VIEW rendering of every block of *doc* to *out*."""
    for element in doc.iter_block_items():
        block = classify(doc, element, context)
        context.count("blocks")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Block %s style=%r kind=%s", element.tag.split("}")[-1],
                         block.style_name, block.kind.value)

        markers, context.region = transition(context.region, block.kind)
        text = render_block(doc, element, block, context)
        out.write("".join(markers))
        out.write(text)

        footnotes = context.footnotes.flush()
        if footnotes:
            out.write(footnotes + "\n")

    markers, context.region = transition(context.region, None)
    out.write("".join(markers))
    return context


def convert_odt_to_review(doc: OdtDocument, context: ConversionContext,
                          output_path: Optional[str | Path] = None) -> Path:
    """Convert *doc* into a Re:VIEW file and return the file path.

    The output file is created before any block is walked; failure to create
    it raises :class:`OutputFileError`. Later I/O errors propagate unchanged
    and may leave a truncated file behind.
    """
    output_path = Path(output_path) if output_path is not None else context.output_path
    logger.info("Starting ODT->Re:VIEW conversion: %s -> %s", doc.path.name, output_path)

    try:
        out = open(output_path, "w", encoding="utf-8", newline="\n")
    except OSError as exc:
        logger.error("I/O FAIL: cannot create output file path=%s", output_path, exc_info=True)
        raise OutputFileError(f"Cannot create output file: {exc}", output_path, exc) from exc

    with out:
        walk_document(doc, out, context)

    logger.info(
        "Conversion finished: blocks=%d footnotes=%d images=%d skipped_images=%d",
        context.stats.get("blocks", 0), context.stats.get("footnotes", 0),
        context.stats.get("images", 0), context.stats.get("images_skipped", 0),
    )
    return output_path
