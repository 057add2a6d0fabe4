from __future__ import annotations

"""Word-processing parser helpers.

Provides ODT container access and paragraph-style classification used by the
conversion pipeline.
"""

from .odt_utils import OdtDocument, qn  # noqa: F401
from .style_analyzer import BlockClass, BlockKind, ListKind, StyleRules, classify_block, heading_level  # noqa: F401

__all__: list[str] = [
    "OdtDocument",
    "qn",
    "BlockClass",
    "BlockKind",
    "ListKind",
    "StyleRules",
    "classify_block",
    "heading_level",
]
