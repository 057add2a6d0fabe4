from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no disk I/O; they can be used
across all layers of the toolkit.
"""

import logging
import re

__all__ = [
    "PAGE_WIDTH_CM",
    "escape_param",
    "width_to_page_ratio",
    "heading_marker",
    "parse_length",
    "strip_document_suffix",
]

logger = logging.getLogger(__name__)

PAGE_WIDTH_CM = 15.1

_CM_WIDTH_PATTERN = re.compile(r"\A([\d.]+)cm")
_LEADING_NUMBER_PATTERN = re.compile(r"\A\s*(-?[\d.]+)")


def escape_param(text: str) -> str:
    """Escape ``]`` inside a block-directive parameter.

    Re:VIEW terminates ``//directive[...]`` parameters at the first closing
    bracket, so captions, footnote bodies and link texts must have theirs
    prefixed with a backslash. Single pass: already escaped input is escaped
    again.
    """
    return text.replace("]", "\\]")


def width_to_page_ratio(width: str | None, page_width_cm: float = PAGE_WIDTH_CM) -> str:
    """Return *width* as a percentage of the printable page width.

    Only centimetre widths are converted (``"7.55cm"`` → ``"50.00%"``);
    any other unit yields an empty string, meaning "no width annotation".
    """
    if not width:
        return ""
    match = _CM_WIDTH_PATTERN.match(width)
    if not match:
        return ""
    try:
        value = float(match.group(1))
    except ValueError:
        logger.debug("Unparsable width %r", width)
        return ""
    return "%.2f%%" % ((value / page_width_cm) * 100)


def heading_marker(level: int) -> str:
    """Return the Re:VIEW heading marker for *level* (``2`` → ``"=="``)."""
    return "=" * level


def parse_length(value: str | None) -> float:
    """Return the numeric part of an ODF length such as ``"1.27cm"``.

    The unit is ignored; missing or unparsable values count as ``0``.
    """
    if not value:
        return 0.0
    match = _LEADING_NUMBER_PATTERN.match(value)
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def strip_document_suffix(filename: str, suffix: str = ".odt") -> str:
    """Return *filename* without a trailing *suffix* (exact, case-sensitive)."""
    if suffix and filename.endswith(suffix) and filename != suffix:
        return filename[: -len(suffix)]
    return filename
