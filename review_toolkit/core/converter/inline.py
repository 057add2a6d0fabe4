from __future__ import annotations

"""Inline-content rendering for the ODT → Re:VIEW conversion.

Turns the inline children of a paragraph (runs, spans, links, footnote
anchors and embedded frames) into a single line of Re:VIEW text. Footnote
definitions found on the way are pushed to the run's footnote collector and
written by the walker once the enclosing block is done.
"""

from pathlib import PurePosixPath
from typing import List, Optional
import logging
import re

from lxml import etree as ET  # type: ignore

from review_toolkit.core.models import ConversionContext
from review_toolkit.core.parser.odt_utils import OdtDocument, qn, whitespace_text
from review_toolkit.core.utils import escape_param, width_to_page_ratio

logger = logging.getLogger(__name__)

__all__ = [
    "render_inline",
    "process_footnote",
    "process_frame",
    "process_link",
    "process_span",
]

_NOTE = qn("text:note")
_NOTE_BODY = qn("text:note-body")
_FRAME = qn("draw:frame")
_LINK = qn("text:a")
_SPAN = qn("text:span")
_SPACE = qn("text:s")
_TAB = qn("text:tab")
_HREF = qn("xlink:href")

_EXTERNAL_HREF = re.compile(r"\A[a-zA-Z][a-zA-Z0-9+.-]*:")


def render_inline(doc: OdtDocument, element: Optional[ET._Element], context: ConversionContext) -> str:
    """Render the children of *element* as one Re:VIEW text fragment.

    Carriage returns are removed; ``None`` renders as an empty string.
    """
    if element is None:
        return ""

    parts: List[str] = []
    if element.text:
        parts.append(element.text)
    for node in element.iterchildren(tag=ET.Element):
        parts.append(_render_node(doc, node, context))
        if node.tail:
            parts.append(node.tail)
    return "".join(parts).replace("\r", "")


def _render_node(doc: OdtDocument, node: ET._Element, context: ConversionContext) -> str:
    tag = node.tag
    if tag == _NOTE:
        return process_footnote(doc, node, context)
    if tag == _FRAME:
        return process_frame(doc, node, context)
    if tag == _LINK:
        return process_link(doc, node, context)
    if tag == _SPAN:
        return process_span(doc, node, context)
    if tag in (_SPACE, _TAB):
        return whitespace_text(node) or ""
    return render_inline(doc, node, context)


# ---------------------------------------------------------------------------
# Footnotes, links and spans
# ---------------------------------------------------------------------------

def process_footnote(doc: OdtDocument, note: ET._Element, context: ConversionContext) -> str:
    """Queue the note's definition and return its ``@<fn>{id}`` reference."""
    footnote_id = context.footnote_id(note.get(qn("text:id"), ""))
    body = note.find(_NOTE_BODY)
    context.footnotes.push(footnote_id, render_inline(doc, body, context))
    context.count("footnotes")
    return f"@<fn>{{{footnote_id}}}"


def process_link(doc: OdtDocument, link: ET._Element, context: ConversionContext) -> str:
    href = link.get(_HREF, "")
    text = escape_param(render_inline(doc, link, context))
    return f"@<href>{{{href},{text}}}"


def process_span(doc: OdtDocument, span: ET._Element, context: ConversionContext) -> str:
    """Render a span, wrapping it in ``@<b>{}`` when its style is bold.

    Only the font weight is mapped; italics, underline and colours are
    dropped.
    """
    text = render_inline(doc, span, context)
    if doc.style_properties(span).get("fo:font-weight") == "bold":
        return f"@<b>{{{text}}}"
    return text


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def _strip_suffix(name: str, suffixes) -> str:
    for suffix in suffixes:
        if suffix and name.endswith(suffix) and name != suffix:
            return name[: -len(suffix)]
    return name


def process_frame(doc: OdtDocument, frame: ET._Element, context: ConversionContext) -> str:
    """Extract the frame's picture and return an ``//indepimage`` line.

    Frames without a picture, vector pictures and pictures linked from
    outside the container render as an empty string.
    """
    image = doc.image_element(frame)
    if image is None:
        return ""
    href = image.get(_HREF, "")
    if not href:
        return ""

    settings = context.settings
    if PurePosixPath(href).suffix.lower() in settings.vector_extensions:
        logger.debug("Skipping vector image %s", href)
        context.count("images_skipped")
        return ""
    if _EXTERNAL_HREF.match(href) or not doc.has_part(href):
        logger.debug("Skipping image not stored in the container: %s", href)
        context.count("images_skipped")
        return ""

    basename = PurePosixPath(href).name
    context.image_dir.mkdir(parents=True, exist_ok=True)
    doc.raw_export(href, context.image_dir / f"{context.filebase}-{basename}")
    context.count("images")
    image_name = _strip_suffix(basename, settings.image_suffixes)

    width = ""
    image_frame = image.getparent()
    if image_frame is not None and image_frame.tag == _FRAME:
        frame_width, _ = doc.image_size(image_frame)
        width = width_to_page_ratio(frame_width, settings.page_width_cm)

    caption = escape_param(doc.get_text(frame).replace("\n", ""))
    if width:
        return f'//indepimage[{image_name}][{caption}][width="{width}"]\n'
    return f"//indepimage[{image_name}][{caption}]\n"
