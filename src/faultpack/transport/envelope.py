"""
Envelope wire framing.

    {"event_id":"9ec79c33ec9942ab8353589fcb2e04dc"}\n
    {"type":"event","length":41}\n
    <41 raw payload bytes>\n

Header records are compact JSON on a single line. Payloads are copied byte
for byte, so they may contain anything, newlines included.
"""

import logging
from collections.abc import Iterator
from typing import Any, BinaryIO, Protocol

from pydantic import TypeAdapter, ValidationError

from faultpack.errors import EnvelopeParseError
from faultpack.models.envelope import Envelope, EnvelopeHeaders, EnvelopeItem, EnvelopePayload

logger = logging.getLogger(__name__)

_HEADERS = TypeAdapter(dict[str, Any])


class BinarySink(Protocol):
    def write(self, data: bytes) -> Any: ...


class AsyncBinarySink(Protocol):
    """The subset of ``asyncio.StreamWriter`` used for envelope output."""

    def write(self, data: bytes) -> Any: ...

    async def drain(self) -> None: ...


def _header_record(headers: EnvelopeHeaders) -> bytes:
    return headers.to_json_bytes() + b"\n"


def iter_records(envelope: Envelope) -> Iterator[bytes]:
    """Yield the envelope as whole wire records, in order."""
    yield _header_record(envelope.headers)
    for item in envelope.items:
        yield _header_record(item.headers)
        yield item.payload.data + b"\n"


def _write_all(sink: BinarySink, record: bytes) -> None:
    # Raw (unbuffered) sinks may accept only part of a record per call.
    # Sinks that report no count are taken to have written everything.
    while record:
        written = sink.write(record)
        if not isinstance(written, int) or written >= len(record):
            return
        if written <= 0:
            raise OSError("Sink accepted no bytes")
        record = record[written:]


def serialize_envelope(envelope: Envelope, sink: BinarySink) -> None:
    """Write ``envelope`` to a binary sink, raw or buffered. Sink errors propagate unchanged."""
    logger.debug("Writing envelope with %d item(s)", len(envelope.items))
    for record in iter_records(envelope):
        _write_all(sink, record)


async def serialize_envelope_async(envelope: Envelope, writer: AsyncBinarySink) -> None:
    """Write ``envelope`` to an asyncio stream, draining after every whole record.

    Cancellation can only land in ``drain()``, so a record is never cut in half.
    """
    logger.debug("Writing envelope with %d item(s)", len(envelope.items))
    for record in iter_records(envelope):
        writer.write(record)
        await writer.drain()


def envelope_to_bytes(envelope: Envelope) -> bytes:
    return b"".join(iter_records(envelope))


def _read_line(data: bytes, pos: int) -> tuple[bytes, int]:
    end = data.find(b"\n", pos)
    if end == -1:
        return data[pos:], len(data)
    return data[pos:end], end + 1


def _parse_headers(line: bytes, offset: int) -> dict[str, Any]:
    try:
        return _HEADERS.validate_json(line)
    except ValidationError as e:
        raise EnvelopeParseError(f"Invalid header record: {e.errors()[0]['msg']}", offset=offset)


def parse_envelope(data: bytes) -> Envelope:
    """Parse wire bytes back into an Envelope.

    Items that declare a ``length`` header are read by length; others run to
    the next newline.
    """
    line, pos = _read_line(data, 0)
    headers = _parse_headers(line, 0)

    items: list[EnvelopeItem] = []
    while pos < len(data):
        start = pos
        line, pos = _read_line(data, pos)
        if not line and pos >= len(data):
            break
        item_headers = EnvelopeHeaders(_parse_headers(line, start))

        length = item_headers.get("length")
        if length is None:
            payload, pos = _read_line(data, pos)
        else:
            if not isinstance(length, int) or isinstance(length, bool) or length < 0:
                raise EnvelopeParseError(f"Invalid item length: {length!r}", offset=start)
            end = pos + length
            if end > len(data):
                raise EnvelopeParseError(
                    f"Item payload truncated: expected {length} bytes, got {len(data) - pos}",
                    offset=pos,
                )
            payload = data[pos:end]
            pos = end
            if pos < len(data):
                if data[pos:pos + 1] != b"\n":
                    raise EnvelopeParseError("Item payload is not newline-terminated", offset=pos)
                pos += 1

        items.append(EnvelopeItem(headers=item_headers, payload=EnvelopePayload(data=payload)))

    return Envelope(headers=headers, items=tuple(items))


def read_envelope(stream: BinaryIO) -> Envelope:
    return parse_envelope(stream.read())
