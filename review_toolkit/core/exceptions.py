from __future__ import annotations

"""Conversion exception classes.

Every fatal condition of a conversion run is reported through one of these
classes so that front-ends (CLI, tests, other callers) can tell an unusable
input document apart from an unwritable output location.
"""

from pathlib import Path
from typing import Optional, Union

__all__ = [
    "ConversionError",
    "InputDocumentError",
    "OutputFileError",
]


class ConversionError(Exception):
    """Base exception for all conversion errors.

    Carries the offending *path* (when known) and the underlying *cause* so
    that callers can log a useful message without re-parsing the text.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.cause = cause

    def __str__(self) -> str:
        if self.path is not None:
            return f"{super().__str__()} [{self.path}]"
        return super().__str__()


class InputDocumentError(ConversionError):
    """Raised when the input document cannot be opened or parsed.

    Covers a missing file, a container that is not a zip archive, and a
    missing or malformed ``content.xml`` part.
    """
    pass


class OutputFileError(ConversionError):
    """Raised when the output markup file cannot be created."""
    pass
