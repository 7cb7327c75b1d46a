from faultpack.transport.envelope import (
    envelope_to_bytes,
    parse_envelope,
    read_envelope,
    serialize_envelope,
    serialize_envelope_async,
)

__all__ = [
    "envelope_to_bytes",
    "parse_envelope",
    "read_envelope",
    "serialize_envelope",
    "serialize_envelope_async",
]
