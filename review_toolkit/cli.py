"""
Command-line interface for the review toolkit.

Usage:
    review-toolkit document.odt

Writes ``document.re`` and extracted pictures (``images/document-*``) into
the current directory.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from review_toolkit.core.exceptions import ConversionError
from review_toolkit.core.services import ConversionService
from review_toolkit.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="review-toolkit",
        description="Convert an OpenDocument Text file into Re:VIEW markup",
    )
    parser.add_argument("input", help="Input .odt file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a conversion and return the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging()

    service = ConversionService()
    try:
        output_path = service.convert(args.input, Path.cwd())
    except ConversionError as exc:
        logger.error("Conversion failed: %s", exc)
        return 1

    logger.debug("Wrote %s", output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
