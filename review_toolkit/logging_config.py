from __future__ import annotations

"""Central logging configuration for the review toolkit.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import sys
from typing import Any, Dict, Optional

from review_toolkit.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging(level: Optional[int] = None) -> None:
    """Configure logging from the ``logging.yml`` configuration section.

    *level*, when given, overrides the level of the ``review_toolkit``
    logger after the configuration has been applied.
    """
    try:
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).debug("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        # Error in the config mapping, fall back to minimal logging
        print(f"Error loading logging config: {exc}", file=sys.stderr)
        _setup_minimal_logging()

    if level is not None:
        logging.getLogger("review_toolkit").setLevel(level)


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config: Dict[str, Any] = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
                'stream': 'ext://sys.stderr',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.getLogger(__name__).warning("===== Logging initialised with minimal fallback =====")
