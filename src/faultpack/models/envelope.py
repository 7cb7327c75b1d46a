"""
Envelope models.

An envelope is one header record plus an ordered list of items. Every item
carries its own header record and an opaque byte payload. All three types
are frozen once constructed.
"""

import uuid
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from faultpack.errors import EnvelopeError

if TYPE_CHECKING:
    from faultpack.models.event import Event

_HEADER_JSON = TypeAdapter(dict[str, Any])


class EnvelopeHeaders(Mapping[str, Any]):
    """Read-only header mapping with case-insensitive keys.

    The first spelling of a key is the one kept for the wire; the last value
    written for it wins. Values are encoded once, on construction, so a value
    JSON cannot represent fails here rather than mid-write.
    """

    __slots__ = ("_entries", "_json")

    def __init__(self, headers: Optional[Mapping[str, Any]] = None):
        entries: dict[str, tuple[str, Any]] = {}
        for key, value in (headers or {}).items():
            if not isinstance(key, str):
                raise EnvelopeError(f"Header keys must be strings, got {type(key).__name__}")
            folded = key.casefold()
            existing = entries.get(folded)
            entries[folded] = (existing[0] if existing else key, value)
        self._entries = entries
        try:
            self._json = _HEADER_JSON.dump_json({original: value for original, value in entries.values()})
        except ValueError as e:
            raise EnvelopeError(f"Header values must be JSON-serializable: {e}")

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._entries[key.casefold()][1]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def to_json_bytes(self) -> bytes:
        """Compact one-line JSON record, without the trailing newline."""
        return self._json

    def __repr__(self) -> str:
        return f"EnvelopeHeaders({dict(self.items())!r})"


def _as_headers(value: Any) -> Any:
    if isinstance(value, EnvelopeHeaders):
        return value
    if value is None or isinstance(value, Mapping):
        return EnvelopeHeaders(value)
    return value


class EnvelopePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes = b""

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        # Display only; the wire always gets the raw bytes.
        return self.data.decode("utf-8", errors="replace")


class EnvelopeItem(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    headers: EnvelopeHeaders = EnvelopeHeaders()
    payload: EnvelopePayload

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, value: Any) -> Any:
        return _as_headers(value)

    @property
    def type(self) -> Optional[str]:
        return self.headers.get("type")

    @classmethod
    def from_event(cls, event: "Event") -> "EnvelopeItem":
        """Wrap an event, serializing it once so ``length`` always matches the payload."""
        data = event.to_json_bytes()
        return cls(
            headers={"type": "event", "length": len(data)},
            payload=EnvelopePayload(data=data),
        )


class Envelope(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    headers: EnvelopeHeaders = EnvelopeHeaders()
    items: tuple[EnvelopeItem, ...] = ()

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, value: Any) -> Any:
        return _as_headers(value)

    def try_get_event_id(self) -> Optional[uuid.UUID]:
        """The ``event_id`` header as a UUID, or None if missing or malformed."""
        value = self.headers.get("event_id")
        if not isinstance(value, str):
            return None
        try:
            return uuid.UUID(value)
        except ValueError:
            return None

    @classmethod
    def from_event(cls, event: "Event") -> "Envelope":
        return cls(
            headers={"event_id": event.event_id},
            items=(EnvelopeItem.from_event(event),),
        )
