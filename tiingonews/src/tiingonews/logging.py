import logging
import sys

from .config import get_log_level
from .errors import ValidationError

HANDLER_NAME = "tiingonews.stderr"

def _resolve_level(level, verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    if level is None:
        level = get_log_level()
    if isinstance(level, str):
        value = logging.getLevelName(level.strip().upper())
        if not isinstance(value, int):
            raise ValidationError(f"Unknown log level: {level}", {"level": level})
        return value
    return level

def configure_logging(level=None, verbose: bool = False) -> logging.Handler:
    """
    Send logs to stderr so stdout stays valid JSON.
    Level comes from `level`, else TIINGONEWS_LOG_LEVEL; `verbose` forces DEBUG.
    Repeated calls reuse the tiingonews handler and point it at the current stderr.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(level, verbose))

    for handler in root_logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            handler.setStream(sys.stderr)
            return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))

    # Remove existing handlers to avoid duplicates
    if root_logger.handlers:
        root_logger.handlers.clear()

    root_logger.addHandler(handler)
    return handler
