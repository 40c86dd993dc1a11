"""
Logging setup and the exception hierarchy of the outline engine.
"""

import logging
import sys
from typing import Optional

from .config import LOG_LEVEL


LOGGER_NAME = "outline_engine"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Return the package logger, attaching a stdout handler on first use.

    Module loggers created with ``logging.getLogger(__name__)`` inside the
    package are children of this logger and share its handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL); defaults
            to OUTLINE_LOG_LEVEL. Unknown names fall back to INFO.
    """
    if level is None:
        level = LOG_LEVEL

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(numeric_level)

    return logger


class OutlineProcessingError(Exception):
    """Base class of errors raised while turning a document into an outline."""
    pass


class InputDocumentError(OutlineProcessingError):
    """The source file was rejected before any parsing took place."""
    pass


class UnsupportedDocumentError(InputDocumentError):
    """The source file does not have a PDF extension."""
    pass


class EmptyDocumentError(InputDocumentError):
    """The source file has zero bytes."""
    pass


class DocumentParseError(OutlineProcessingError):
    """The document container could not be decoded."""
    pass


class JSONOutputError(OutlineProcessingError):
    """The outline could not be serialized or written."""
    pass


# Failures that are reported without a traceback
EXPECTED_ERRORS = (OutlineProcessingError, FileNotFoundError)


def handle_processing_error(source: str, error: Exception, logger: logging.Logger) -> None:
    """
    Log a per-document failure.

    Expected failures get a one-line error; anything else is logged with its
    traceback.
    """
    message = f"Error processing document '{source}': {error}"

    if isinstance(error, EXPECTED_ERRORS):
        logger.error(message)
    else:
        logger.exception(message)
