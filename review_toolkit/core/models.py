from __future__ import annotations

"""Shared data structures used across the review toolkit core.

This module is intentionally free of I/O code so that the contained objects
can be reused in any context (unit-tests, CLI, service layer).
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from review_toolkit.core.parser.style_analyzer import StyleRules
from review_toolkit.core.utils import PAGE_WIDTH_CM, parse_length, escape_param

__all__ = [
    "RegionState",
    "FootnoteCollector",
    "ConversionSettings",
    "ConversionContext",
]


class RegionState(Enum):
    """Multi-line markup region currently left open by the walker."""

    NONE = "none"
    CODE = "code"
    QUOTE = "quote"
    AUTHOR = "author"


class FootnoteCollector:
    """Buffer of ``//footnote`` lines discovered while rendering one block.

    The walker flushes the buffer after every block, so entries never cross
    a block boundary.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []

    def push(self, footnote_id: str, body: str) -> None:
        """Append one footnote definition for *footnote_id*.

        *body* is the rendered note text; one leading newline and all
        trailing whitespace are removed before escaping.
        """
        if body.startswith("\n"):
            body = body[1:]
        body = escape_param(body.rstrip())
        self._lines.append(f"//footnote[{footnote_id}][{body}]\n")

    def flush(self) -> str:
        """Return the pending footnote lines and clear the buffer."""
        text = "".join(self._lines)
        self._lines = []
        return text

    def __len__(self) -> int:
        return len(self._lines)


@dataclass
class ConversionSettings:
    """Typed view of the ``conversion`` configuration section."""

    page_width_cm: float = PAGE_WIDTH_CM
    image_dir: str = "images"
    image_suffixes: Tuple[str, ...] = (".jpg", ".png")
    vector_extensions: Tuple[str, ...] = (".wmf", ".emf", ".svm")
    output_extension: str = "re"
    table_separator_width: int = 14

    @classmethod
    def from_config(cls, data: Mapping[str, Any] | None) -> "ConversionSettings":
        """Build settings from a config mapping, keeping defaults for gaps."""
        settings = cls()
        if not data:
            return settings
        if data.get("page_width"):
            width = parse_length(str(data["page_width"]))
            if width > 0:
                settings.page_width_cm = width
        if data.get("image_dir"):
            settings.image_dir = str(data["image_dir"])
        if data.get("image_suffixes") is not None:
            settings.image_suffixes = tuple(str(s) for s in data["image_suffixes"])
        if data.get("vector_extensions") is not None:
            settings.vector_extensions = tuple(str(s).lower() for s in data["vector_extensions"])
        if data.get("output_extension"):
            settings.output_extension = str(data["output_extension"]).lstrip(".")
        if data.get("table_separator_width") is not None:
            settings.table_separator_width = int(data["table_separator_width"])
        return settings


@dataclass
class ConversionContext:
    """State of a single conversion run.

    Attributes
    ----------
    filebase
        Input file name without its ``.odt`` suffix; namespaces footnote ids
        and extracted image names.
    output_dir
        Directory receiving the markup file and the image directory.
    footnotes
        Pending footnote definitions for the block being rendered.
    region
        Multi-line region left open by the previous block.
    """

    filebase: str
    output_dir: Path = field(default_factory=Path.cwd)
    settings: ConversionSettings = field(default_factory=ConversionSettings)
    style_rules: StyleRules = field(default_factory=StyleRules)
    footnotes: FootnoteCollector = field(default_factory=FootnoteCollector)
    region: RegionState = RegionState.NONE
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def image_dir(self) -> Path:
        return Path(self.output_dir) / self.settings.image_dir

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir) / f"{self.filebase}.{self.settings.output_extension}"

    def footnote_id(self, note_id: str) -> str:
        return f"{self.filebase}_{note_id}"

    def count(self, key: str) -> None:
        self.stats[key] = self.stats.get(key, 0) + 1
