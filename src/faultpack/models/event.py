"""
Event models: the domain record an envelope usually carries.
"""

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, Field

from faultpack.models.frame import StackTrace

Level = Literal["fatal", "error", "warning", "info", "debug"]


def new_event_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExceptionValue(BaseModel):
    type: str
    value: Optional[str] = None
    module: Optional[str] = None
    stacktrace: Optional[StackTrace] = None


class ExceptionList(BaseModel):
    """Chained exceptions, oldest first. The last value is the one raised."""
    values: list[ExceptionValue] = []


class Event(BaseModel):
    event_id: str = Field(default_factory=new_event_id, pattern=r"^[0-9a-f]{32}$")
    timestamp: datetime = Field(default_factory=_utcnow)
    platform: str = "python"
    level: Level = "error"
    logger: Optional[str] = None
    message: Optional[str] = None
    exception: Optional[ExceptionList] = None
    stacktrace: Optional[StackTrace] = None

    def to_json_bytes(self) -> bytes:
        """Compact JSON wire form. Unset optional fields are omitted."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")
