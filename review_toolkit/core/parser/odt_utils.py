from __future__ import annotations

"""Low-level OpenDocument Text utilities shared by the converter.

:class:`OdtDocument` is a read-only view over an ``.odt`` container: it
unpacks the zip archive once, parses ``content.xml`` and ``styles.xml`` with
lxml and answers the handful of questions the converter asks (block order,
style names and inherited properties, list styles, table geometry, frame
sizes, embedded picture bytes).
"""

from pathlib import Path
from typing import Dict, Generator, List, Mapping, Optional, Tuple
import logging
import posixpath
import zipfile

from lxml import etree as ET  # type: ignore

from review_toolkit.core.exceptions import InputDocumentError

logger = logging.getLogger(__name__)

__all__ = [
    "NAMESPACES",
    "qn",
    "prefixed_name",
    "OdtDocument",
    "whitespace_text",
]

NAMESPACES: Dict[str, str] = {
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "table": "urn:oasis:names:tc:opendocument:xmlns:table:1.0",
    "draw": "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
    "xlink": "http://www.w3.org/1999/xlink",
    "svg": "urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0",
}
_PREFIXES = {uri: prefix for prefix, uri in NAMESPACES.items()}

CONTENT_XML_PATH = "content.xml"
STYLES_XML_PATH = "styles.xml"

# Paragraph-like blocks yielded by iter_block_items; text:section is descended.
_BLOCK_TAGS = {"text:p", "text:h", "text:list", "table:table", "draw:frame"}
_CONTAINER_TAGS = {"text:section"}

# Cap for table:number-columns-repeated; LibreOffice pads tables with huge
# repeat counts on empty trailing cells.
_MAX_REPEAT = 256


def qn(name: str) -> str:
    """Return the Clark-notation tag for a prefixed name (``text:p``)."""
    prefix, local = name.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


def prefixed_name(tag: str) -> str:
    """Inverse of :func:`qn`; unknown namespaces keep Clark notation."""
    if not isinstance(tag, str) or not tag.startswith("{"):
        return str(tag)
    uri, local = tag[1:].split("}", 1)
    prefix = _PREFIXES.get(uri)
    return f"{prefix}:{local}" if prefix else tag


_BLOCK_QNAMES = {qn(t) for t in _BLOCK_TAGS}
_CONTAINER_QNAMES = {qn(t) for t in _CONTAINER_TAGS}
_PARAGRAPH_QNAMES = {qn("text:p"), qn("text:h")}


def _parse_part(data: bytes, name: str, path: Path) -> ET._Element:
    parser = ET.XMLParser(resolve_entities=False, remove_blank_text=False)
    try:
        return ET.fromstring(data, parser=parser)
    except ET.XMLSyntaxError as exc:
        raise InputDocumentError(f"Invalid XML in {name}: {exc}", path, exc) from exc


class OdtDocument:
    """Parsed ``.odt`` container."""

    def __init__(self, path: Path, raw_parts: Mapping[str, bytes],
                 content_root: ET._Element, styles_root: Optional[ET._Element] = None) -> None:
        self.path = Path(path)
        self.raw_parts = raw_parts
        self.content_root = content_root
        self.styles_root = styles_root

        self._automatic_styles: Dict[str, ET._Element] = {}
        self._named_styles: Dict[str, ET._Element] = {}
        self._list_styles: Dict[str, ET._Element] = {}
        self._index_styles()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def load(cls, path: str | Path) -> "OdtDocument":
        """Open an ``.odt`` archive and parse its content and style parts."""
        path = Path(path)
        if not path.is_file():
            raise InputDocumentError("Input document not found", path)

        try:
            with zipfile.ZipFile(path) as odt_zip:
                parts = {name: odt_zip.read(name) for name in odt_zip.namelist()}
        except (zipfile.BadZipFile, OSError) as exc:
            raise InputDocumentError(f"Cannot open document container: {exc}", path, exc) from exc

        logger.debug("Loaded %d parts from %s", len(parts), path.name)

        content = parts.get(CONTENT_XML_PATH)
        if content is None:
            raise InputDocumentError("Container has no content.xml part", path)
        content_root = _parse_part(content, CONTENT_XML_PATH, path)
        if content_root.find(f"{qn('office:body')}/{qn('office:text')}") is None:
            raise InputDocumentError("content.xml has no office:text body", path)

        styles_root = None
        styles = parts.get(STYLES_XML_PATH)
        if styles is None:
            logger.warning("Container has no styles.xml part; named styles unavailable")
        else:
            styles_root = _parse_part(styles, STYLES_XML_PATH, path)

        return cls(path, parts, content_root, styles_root)

    @classmethod
    def from_xml(cls, content_xml: bytes | str, styles_xml: bytes | str | None = None,
                 parts: Optional[Mapping[str, bytes]] = None,
                 path: str | Path = "document.odt") -> "OdtDocument":
        """Build a document straight from XML strings (tests, tooling)."""
        path = Path(path)
        if isinstance(content_xml, str):
            content_xml = content_xml.encode("utf-8")
        if isinstance(styles_xml, str):
            styles_xml = styles_xml.encode("utf-8")
        raw_parts: Dict[str, bytes] = dict(parts or {})
        raw_parts[CONTENT_XML_PATH] = content_xml
        styles_root = None
        if styles_xml is not None:
            raw_parts[STYLES_XML_PATH] = styles_xml
            styles_root = _parse_part(styles_xml, STYLES_XML_PATH, path)
        return cls(path, raw_parts, _parse_part(content_xml, CONTENT_XML_PATH, path), styles_root)

    def _index_styles(self) -> None:
        auto = self.content_root.find(qn("office:automatic-styles"))
        if auto is not None:
            for style in auto.iterfind(qn("style:style")):
                self._automatic_styles[style.get(qn("style:name"), "")] = style
            for lst in auto.iterfind(qn("text:list-style")):
                self._list_styles[lst.get(qn("style:name"), "")] = lst

        if self.styles_root is not None:
            named = self.styles_root.find(qn("office:styles"))
            if named is not None:
                for style in named.iterfind(qn("style:style")):
                    self._named_styles[style.get(qn("style:name"), "")] = style
                for lst in named.iterfind(qn("text:list-style")):
                    self._list_styles.setdefault(lst.get(qn("style:name"), ""), lst)

        logger.debug(
            "Style index: automatic=%d named=%d list=%d",
            len(self._automatic_styles), len(self._named_styles), len(self._list_styles),
        )

    # ------------------------------------------------------------------
    # Block traversal
    # ------------------------------------------------------------------
    @property
    def body(self) -> ET._Element:
        body = self.content_root.find(f"{qn('office:body')}/{qn('office:text')}")
        if body is None:
            raise InputDocumentError("content.xml has no office:text body", self.path)
        return body

    def iter_block_items(self, parent: Optional[ET._Element] = None) -> Generator[ET._Element, None, None]:
        """Yield paragraphs, headings, lists, tables and frames in document order.

        Sections are descended; declarations, forms and generated indexes
        (tables of contents) are skipped.
        """
        root = self.body if parent is None else parent
        for child in root.iterchildren(tag=ET.Element):
            if child.tag in _BLOCK_QNAMES:
                yield child
            elif child.tag in _CONTAINER_QNAMES:
                yield from self.iter_block_items(child)
            elif logger.isEnabledFor(logging.DEBUG):
                logger.debug("Skipping body element %s", prefixed_name(child.tag))

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------
    def text_style(self, element: ET._Element) -> Optional[str]:
        """Return the style name attached to *element*.

        List items carry no style of their own; their first paragraph's
        style stands in for them.
        """
        if element.tag == qn("text:list-item"):
            for child in element.iterchildren(tag=ET.Element):
                if child.tag in _PARAGRAPH_QNAMES:
                    return self.text_style(child)
            return None
        for attr in ("text:style-name", "table:style-name", "draw:style-name"):
            value = element.get(qn(attr))
            if value:
                return value
        return None

    def get_style_element(self, name: Optional[str]) -> Optional[ET._Element]:
        """Look *name* up in the automatic styles, then the named styles."""
        if not name:
            return None
        style = self._automatic_styles.get(name)
        if style is None:
            style = self._named_styles.get(name)
        return style

    def style_name(self, element: ET._Element) -> str:
        """Return the paragraph-style name used for block classification.

        Automatic styles (``P1``, ``P2``…) are replaced by their parent
        style, which is the name the author actually picked.
        """
        name = self.text_style(element) or ""
        style = self._automatic_styles.get(name)
        if style is not None:
            parent = style.get(qn("style:parent-style-name"))
            if parent:
                return parent
        return name

    def style_properties(self, element: ET._Element) -> Dict[str, str]:
        """Return the effective formatting properties of *element*'s style.

        Properties of every ``style:*-properties`` child are merged, keyed by
        prefixed attribute name (``fo:font-weight``). Missing keys are
        inherited through ``style:parent-style-name``.
        """
        properties: Dict[str, str] = {}
        style = self.get_style_element(self.text_style(element))
        seen: set[str] = set()
        while style is not None:
            name = style.get(qn("style:name"), "")
            if name in seen:
                logger.warning("Style inheritance loop at %r", name)
                break
            seen.add(name)
            for child in style.iterchildren(tag=ET.Element):
                if not child.tag.endswith("-properties"):
                    continue
                for key, value in child.attrib.items():
                    properties.setdefault(prefixed_name(key), value)
            parent = style.get(qn("style:parent-style-name"))
            style = self._named_styles.get(parent) if parent else None
        return properties

    def is_bullet_list(self, style_name: Optional[str]) -> bool:
        """Return True when the list style's first level uses bullets.

        Lists without a resolvable style are treated as bulleted.
        """
        list_style = self._list_styles.get(style_name or "")
        if list_style is None:
            logger.debug("List style %r not found; assuming bullets", style_name)
            return True
        for level_style in list_style.iterchildren(tag=ET.Element):
            if level_style.get(qn("text:level")) == "1":
                return level_style.tag == qn("text:list-level-style-bullet")
        return True

    # ------------------------------------------------------------------
    # Lists and tables
    # ------------------------------------------------------------------
    @staticmethod
    def list_items(list_element: ET._Element) -> List[ET._Element]:
        return list(list_element.iterchildren(qn("text:list-item")))

    @staticmethod
    def table_name(table: ET._Element) -> str:
        return table.get(qn("table:name"), "")

    def table_rows(self, table: ET._Element) -> List[List[Optional[ET._Element]]]:
        """Return the table as a row-major grid of cell elements.

        Repeated rows and columns are expanded; rows shorter than the
        declared column count are padded with ``None``.
        """
        columns = sum(self._repeat(col, "table:number-columns-repeated")
                      for col in self._iter_columns(table))

        rows: List[List[Optional[ET._Element]]] = []
        for row in self._iter_rows(table):
            cells: List[Optional[ET._Element]] = []
            for cell in row.iterchildren(qn("table:table-cell"), qn("table:covered-table-cell")):
                cells.extend([cell] * self._repeat(cell, "table:number-columns-repeated"))
            for _ in range(self._repeat(row, "table:number-rows-repeated")):
                rows.append(list(cells))

        width = max([columns] + [len(r) for r in rows]) if rows else columns
        for cells in rows:
            cells.extend([None] * (width - len(cells)))
        return rows

    def _iter_columns(self, parent: ET._Element) -> Generator[ET._Element, None, None]:
        for child in parent.iterchildren(tag=ET.Element):
            if child.tag == qn("table:table-column"):
                yield child
            elif child.tag in (qn("table:table-header-columns"), qn("table:table-columns"),
                               qn("table:table-column-group")):
                yield from self._iter_columns(child)

    def _iter_rows(self, parent: ET._Element) -> Generator[ET._Element, None, None]:
        for child in parent.iterchildren(tag=ET.Element):
            if child.tag == qn("table:table-row"):
                yield child
            elif child.tag in (qn("table:table-header-rows"), qn("table:table-rows"),
                               qn("table:table-row-group")):
                yield from self._iter_rows(child)

    @staticmethod
    def _repeat(element: ET._Element, attr: str) -> int:
        try:
            count = int(element.get(qn(attr), "1"))
        except ValueError:
            return 1
        return max(1, min(count, _MAX_REPEAT))

    @staticmethod
    def cell_paragraph(cell: Optional[ET._Element]) -> Optional[ET._Element]:
        """Return the first paragraph or heading of *cell*."""
        if cell is None:
            return None
        for child in cell.iterchildren(tag=ET.Element):
            if child.tag in _PARAGRAPH_QNAMES:
                return child
        return None

    # ------------------------------------------------------------------
    # Frames and pictures
    # ------------------------------------------------------------------
    @staticmethod
    def image_element(frame: ET._Element) -> Optional[ET._Element]:
        return next(frame.iter(qn("draw:image")), None)

    @staticmethod
    def image_size(frame: ET._Element) -> Tuple[Optional[str], Optional[str]]:
        """Return the declared ``(svg:width, svg:height)`` of a frame."""
        return frame.get(qn("svg:width")), frame.get(qn("svg:height"))

    @staticmethod
    def _part_name(href: str) -> str:
        return posixpath.normpath(href).lstrip("/") if href else ""

    def has_part(self, href: str) -> bool:
        return self._part_name(href) in self.raw_parts

    def raw_export(self, href: str, destination: str | Path) -> Path:
        """Write the container part *href* to *destination* unchanged."""
        data = self.raw_parts.get(self._part_name(href))
        if data is None:
            raise KeyError(href)
        destination = Path(destination)
        destination.write_bytes(data)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("I/O: exported %s -> %s (%d bytes)", href, destination, len(data))
        return destination

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    def get_text(self, element: ET._Element) -> str:
        """Return the plain text below *element*.

        ``text:s`` and ``text:tab`` expand to their whitespace; paragraphs
        and line breaks end with a newline.
        """
        parts: List[str] = []
        self._collect_text(element, parts)
        return "".join(parts)

    def _collect_text(self, element: ET._Element, parts: List[str]) -> None:
        whitespace = whitespace_text(element)
        if whitespace is not None:
            parts.append(whitespace)
            return
        if element.text:
            parts.append(element.text)
        for child in element.iterchildren(tag=ET.Element):
            self._collect_text(child, parts)
            if child.tail:
                parts.append(child.tail)
        if element.tag in _PARAGRAPH_QNAMES:
            parts.append("\n")


def whitespace_text(element: ET._Element) -> Optional[str]:
    """Return the text of an ODF whitespace element, or None for others."""
    if element.tag == qn("text:s"):
        try:
            count = int(element.get(qn("text:c"), "1"))
        except ValueError:
            count = 1
        return " " * max(count, 1)
    if element.tag == qn("text:tab"):
        return "\t"
    if element.tag == qn("text:line-break"):
        return "\n"
    return None
