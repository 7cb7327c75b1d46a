"""
faultpack: stack capture and envelope encoding for error telemetry.

Turns exceptions (or the current call stack) into structured frames and
packs events into binary-safe multi-part envelopes ready for a collector.
"""

from faultpack.client import Client
from faultpack.options import CaptureOptions
from faultpack.errors import FaultpackError, EnvelopeError, EnvelopeParseError
from faultpack.models import (
    Envelope,
    EnvelopeHeaders,
    EnvelopeItem,
    EnvelopePayload,
    Event,
    StackFrame,
    StackTrace,
)
from faultpack.protocol import EnvelopeBuilder, EnvelopeItemBuilder
from faultpack.stacktrace import StackTraceFactory
from faultpack.transport import envelope_to_bytes, parse_envelope, serialize_envelope, serialize_envelope_async

__version__ = "0.1.0"
__all__ = [
    "Client",
    "CaptureOptions",
    "FaultpackError",
    "EnvelopeError",
    "EnvelopeParseError",
    "Envelope",
    "EnvelopeHeaders",
    "EnvelopeItem",
    "EnvelopePayload",
    "Event",
    "StackFrame",
    "StackTrace",
    "EnvelopeBuilder",
    "EnvelopeItemBuilder",
    "StackTraceFactory",
    "envelope_to_bytes",
    "parse_envelope",
    "serialize_envelope",
    "serialize_envelope_async",
]
