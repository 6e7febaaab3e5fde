import json
import traceback

class TiingoNewsError(Exception):
    """Base exception for tiingonews"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ValidationError(TiingoNewsError):
    """Configuration validation errors"""
    pass

class DecodeError(TiingoNewsError):
    """Base for failures while decoding a news batch"""
    pass

class MalformedInputError(DecodeError):
    """Payload (or one of its elements) has the wrong JSON shape"""
    pass

class MissingFieldError(DecodeError):
    """A required article field is absent"""
    pass

class TimestampError(DecodeError):
    """A date field does not match the expected ISO-8601 pattern"""
    pass

class UnresolvableTickerError(DecodeError):
    """A raw ticker could not be mapped to a Symbol"""
    pass

class UnsupportedOperationError(TiingoNewsError, NotImplementedError):
    """Operation intentionally not implemented"""
    pass

def format_error(e: Exception) -> str:
    """Format exception as the JSON error envelope"""

    if isinstance(e, TiingoNewsError):
        error_type = e.__class__.__name__
        message = e.message
        details = e.details
    else:
        error_type = "UnknownError"
        message = str(e)
        details = {
            "traceback": traceback.format_exc().splitlines()
        }

    payload = {
        "ok": False,
        "error": {
            "type": error_type,
            "message": message,
            "details": details
        },
        "meta": {
            "version": 1
        }
    }

    return json.dumps(payload, indent=2, default=str)
