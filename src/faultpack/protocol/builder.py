"""
Fluent envelope construction.

    envelope = (
        EnvelopeBuilder()
        .add_event_item(event)
        .add_item(lambda i: i.add_header("type", "attachment").set_data(b"..."))
        .build()
    )
"""

from typing import Any, Callable, Optional, Union

from faultpack.errors import EnvelopeError
from faultpack.models.envelope import Envelope, EnvelopeHeaders, EnvelopeItem, EnvelopePayload
from faultpack.models.event import Event


class EnvelopeItemBuilder:
    def __init__(self) -> None:
        self._headers: dict[str, Any] = {}
        self._data: Optional[bytes] = None

    def add_header(self, key: str, value: Any) -> "EnvelopeItemBuilder":
        _set_header(self._headers, key, value)
        return self

    def set_data(self, data: Union[bytes, bytearray, str]) -> "EnvelopeItemBuilder":
        self._data = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return self

    def build(self) -> EnvelopeItem:
        if self._data is None:
            raise EnvelopeError("Envelope item has no payload. Call set_data() first.")
        return EnvelopeItem(
            headers=EnvelopeHeaders(self._headers),
            payload=EnvelopePayload(data=self._data),
        )


class EnvelopeBuilder:
    def __init__(self) -> None:
        self._headers: dict[str, Any] = {}
        self._items: list[EnvelopeItem] = []

    def add_header(self, key: str, value: Any) -> "EnvelopeBuilder":
        _set_header(self._headers, key, value)
        return self

    def add_item(
        self, item: Union[EnvelopeItem, Callable[[EnvelopeItemBuilder], Any]]
    ) -> "EnvelopeBuilder":
        """Append a built item, or configure a fresh EnvelopeItemBuilder and append its result."""
        if not isinstance(item, EnvelopeItem):
            builder = EnvelopeItemBuilder()
            item(builder)
            item = builder.build()
        self._items.append(item)
        return self

    def add_event_item(self, event: Event) -> "EnvelopeBuilder":
        self.add_header("event_id", event.event_id)
        return self.add_item(EnvelopeItem.from_event(event))

    def build(self) -> Envelope:
        return Envelope(headers=EnvelopeHeaders(self._headers), items=tuple(self._items))


def _set_header(headers: dict[str, Any], key: str, value: Any) -> None:
    if not isinstance(key, str):
        raise EnvelopeError(f"Header keys must be strings, got {type(key).__name__}")
    folded = key.casefold()
    for existing in headers:
        if existing.casefold() == folded:
            headers[existing] = value
            return
    headers[key] = value
