"""
faultpack error types.
"""

from typing import Any, Optional


class FaultpackError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class EnvelopeError(FaultpackError):
    def __init__(self, message: str, code: str = "envelope_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class EnvelopeParseError(EnvelopeError):
    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(
            message,
            code="envelope_parse_error",
            details={"offset": offset} if offset is not None else None,
        )
        self.offset = offset
