from __future__ import annotations

"""ODT to Re:VIEW conversion logic.

This package contains the core conversion pipeline that transforms
OpenDocument Text files into Re:VIEW markup:

1. Block walk: classify each top-level block by paragraph style
2. Region tracking: open/close multi-line code, quote and author blocks
3. Rendering: inline content, lists, tables, images and footnotes

Key modules:
- odt_to_review: Main conversion entry point and document walker
- inline: Inline renderer (spans, links, footnotes, images)
- blocks: List and table converters
- region: Region state machine
"""

from .odt_to_review import convert_odt_to_review, walk_document
from .region import transition

__all__ = [
    "convert_odt_to_review",
    "walk_document",
    "transition",
]
