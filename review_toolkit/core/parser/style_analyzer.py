from __future__ import annotations

"""Paragraph-style classification for the block walker.

Every top-level block is classified exactly once into a closed set of
:class:`BlockKind` values. The walker then matches on the kind instead of
comparing style names all over the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import Any, FrozenSet, Mapping, Optional, Pattern

from review_toolkit.core.parser.odt_utils import qn

logger = logging.getLogger(__name__)

__all__ = [
    "BlockKind",
    "ListKind",
    "BlockClass",
    "StyleRules",
    "classify_block",
    "heading_level",
]

# Heading styles are written as ``Heading_20_<N>`` in content.xml
# (the display name "Heading N" with the space encoded as ``_20_``).
_HEADING_LEVEL_PATTERN = re.compile(r"\AHeading_.*_(\d+)\Z")
_BODY_PATTERN = re.compile(r"\A(?:Text_.*_body|Standard)\Z")

_LIST_TAG = qn("text:list")
_TABLE_TAG = qn("table:table")
_FRAME_TAG = qn("draw:frame")


class BlockKind(Enum):
    TITLE = "title"
    SUBTITLE = "subtitle"
    HEADING = "heading"
    CODE = "code"
    AUTHOR = "author"
    QUOTE = "quote"
    BODY = "body"
    LIST = "list"
    TABLE = "table"
    IMAGE = "image"
    UNKNOWN = "unknown"


class ListKind(Enum):
    BULLET = "bullet"
    NUMBER = "number"


@dataclass(frozen=True)
class BlockClass:
    """Result of classifying one block.

    ``level`` is only meaningful for headings and ``list_kind`` only for
    lists; ``style_name`` is kept for the ``<<name>>`` fallback marker.
    """

    kind: BlockKind
    style_name: str = ""
    level: int = 0
    list_kind: Optional[ListKind] = None


def _names(values: Any, default: FrozenSet[str]) -> FrozenSet[str]:
    if values is None:
        return default
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(str(v) for v in values)


@dataclass(frozen=True)
class StyleRules:
    """Style names recognised by the classifier (see ``style_map.yml``)."""

    title_styles: FrozenSet[str] = frozenset({"Title"})
    subtitle_styles: FrozenSet[str] = frozenset({"Subtitle"})
    code_styles: FrozenSet[str] = frozenset({"プログラムコード"})
    author_styles: FrozenSet[str] = frozenset({"Signature", "連絡先"})
    quote_styles: FrozenSet[str] = frozenset({"Quotations"})
    heading_prefix: str = "Heading"
    body_pattern: Pattern[str] = field(default=_BODY_PATTERN)

    @classmethod
    def from_config(cls, data: Mapping[str, Any] | None) -> "StyleRules":
        """Build rules from the ``style_map`` config section."""
        defaults = cls()
        if not data:
            return defaults
        body_pattern = defaults.body_pattern
        if data.get("body_pattern"):
            try:
                body_pattern = re.compile(str(data["body_pattern"]))
            except re.error as exc:
                logger.error("Invalid body_pattern %r in style map: %s", data["body_pattern"], exc)
        return cls(
            title_styles=_names(data.get("title"), defaults.title_styles),
            subtitle_styles=_names(data.get("subtitle"), defaults.subtitle_styles),
            code_styles=_names(data.get("code"), defaults.code_styles),
            author_styles=_names(data.get("author"), defaults.author_styles),
            quote_styles=_names(data.get("quote"), defaults.quote_styles),
            heading_prefix=str(data.get("heading_prefix") or defaults.heading_prefix),
            body_pattern=body_pattern,
        )


def heading_level(style_name: str) -> int:
    """Return the Re:VIEW heading level for a heading style.

    ``Heading_20_1`` → 2 (level 1 is reserved for the document title);
    ``Heading`` or any other un-numbered heading style → 2.
    """
    match = _HEADING_LEVEL_PATTERN.match(style_name or "")
    if match:
        return int(match.group(1)) + 1
    return 2


def classify_block(tag: str, style_name: str, rules: StyleRules | None = None,
                   list_kind: Optional[ListKind] = None) -> BlockClass:
    """Classify a top-level block by element *tag* and paragraph *style_name*.

    Structural tags win over style names; style names are then tested in a
    fixed order (title, subtitle, heading, code, author, quote, body).
    """
    rules = rules or StyleRules()
    style_name = style_name or ""

    if tag == _LIST_TAG:
        return BlockClass(BlockKind.LIST, style_name, list_kind=list_kind or ListKind.BULLET)
    if tag == _TABLE_TAG:
        return BlockClass(BlockKind.TABLE, style_name)
    if tag == _FRAME_TAG:
        return BlockClass(BlockKind.IMAGE, style_name)
    if style_name in rules.title_styles:
        return BlockClass(BlockKind.TITLE, style_name)
    if style_name in rules.subtitle_styles:
        return BlockClass(BlockKind.SUBTITLE, style_name)
    if style_name.startswith(rules.heading_prefix):
        return BlockClass(BlockKind.HEADING, style_name, level=heading_level(style_name))
    if style_name in rules.code_styles:
        return BlockClass(BlockKind.CODE, style_name)
    if style_name in rules.author_styles:
        return BlockClass(BlockKind.AUTHOR, style_name)
    if style_name in rules.quote_styles:
        return BlockClass(BlockKind.QUOTE, style_name)
    if rules.body_pattern.match(style_name):
        return BlockClass(BlockKind.BODY, style_name)
    return BlockClass(BlockKind.UNKNOWN, style_name)
