"""
Stack frame models.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_MODULE = "(unknown)"


class StackFrame(BaseModel):
    """One normalized call-stack entry."""
    model_config = ConfigDict(frozen=True)

    module: str = Field(UNKNOWN_MODULE, min_length=1)
    package: Optional[str] = None
    function: Optional[str] = None
    filename: Optional[str] = None
    lineno: Optional[int] = None
    colno: Optional[int] = None
    instruction_offset: Optional[int] = None
    in_app: bool = False


class StackTrace(BaseModel):
    """Frames ordered outermost caller first, failing frame last."""
    model_config = ConfigDict(frozen=True)

    frames: tuple[StackFrame, ...] = Field(..., min_length=1)
