from __future__ import annotations

"""High-level conversion service for ODT to Re:VIEW transformation.

Entry-point for any front-end (CLI, scripts, tests) that needs to transform
an OpenDocument Text file into a Re:VIEW manuscript. Reads the style map and
conversion settings from :class:`ConfigManager` once and builds a fresh
:class:`ConversionContext` for every run.
"""

import logging
from pathlib import Path
from typing import List, Optional

from review_toolkit.config import ConfigManager
from review_toolkit.core.converter import convert_odt_to_review
from review_toolkit.core.models import ConversionContext, ConversionSettings
from review_toolkit.core.parser.odt_utils import OdtDocument
from review_toolkit.core.parser.style_analyzer import StyleRules
from review_toolkit.core.utils import strip_document_suffix

logger = logging.getLogger(__name__)

__all__ = ["ConversionService"]


class ConversionService:
    """Business-logic façade with no CLI dependencies."""

    SUPPORTED_EXTENSIONS = (".odt",)

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        config_manager = config_manager or ConfigManager()
        self.style_rules = StyleRules.from_config(config_manager.get_style_map())
        self.settings = ConversionSettings.from_config(config_manager.get_conversion())
        self.logger = logger

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def load(self, file_path: str | Path) -> OdtDocument:
        """Open and parse *file_path*.

        Raises:
            InputDocumentError: If the container or its content part cannot
                be read.
        """
        file_path = Path(file_path)
        self.logger.info("Convert: parsing document")
        self.logger.debug("Loading ODT container: %s", file_path)
        return OdtDocument.load(file_path)

    def create_context(self, file_path: str | Path,
                       output_dir: Optional[str | Path] = None) -> ConversionContext:
        """Return a fresh per-run context for converting *file_path*."""
        filebase = strip_document_suffix(Path(file_path).name)
        return ConversionContext(
            filebase=filebase,
            output_dir=Path(output_dir) if output_dir is not None else Path.cwd(),
            settings=self.settings,
            style_rules=self.style_rules,
        )

    def convert(self, file_path: str | Path, output_dir: Optional[str | Path] = None) -> Path:
        """Convert *file_path* and return the path of the written ``.re`` file.

        The document is parsed before the output file is created, so an
        unreadable input never leaves an output file behind.

        Raises:
            InputDocumentError: If the input cannot be opened or parsed.
            OutputFileError: If the output file cannot be created.
        """
        doc = self.load(file_path)
        context = self.create_context(file_path, output_dir)
        output_path = convert_odt_to_review(doc, context)
        self.logger.info("Convert OK: %s", output_path)
        return output_path

    def get_supported_extensions(self) -> List[str]:
        return list(self.SUPPORTED_EXTENSIONS)

    def can_handle_file(self, file_path: str | Path) -> bool:
        """Return True if *file_path* looks like a convertible document."""
        return Path(file_path).suffix.lower() in self.SUPPORTED_EXTENSIONS
