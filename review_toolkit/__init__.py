"""Top-level package of the review toolkit.

Converts OpenDocument Text files into Re:VIEW manuscripts. Front-ends
(CLI, scripts) should only depend on the public API exposed here rather
than importing internal modules directly.
"""

from .core.models import ConversionContext  # re-export for convenience
from .core.services import ConversionService

__all__: list[str] = [
    "ConversionContext",
    "ConversionService",
]
