"""
Client: turns exceptions and messages into events and envelopes.
"""

from typing import Optional

from faultpack.models.envelope import Envelope
from faultpack.models.event import Event, ExceptionList, ExceptionValue, Level
from faultpack.options import CaptureOptions
from faultpack.protocol.builder import EnvelopeBuilder
from faultpack.stacktrace.factory import StackTraceFactory
from faultpack.transport.envelope import (
    AsyncBinarySink,
    BinarySink,
    serialize_envelope,
    serialize_envelope_async,
)


def _exception_chain(exc: BaseException) -> list[BaseException]:
    """``exc`` and the exceptions it was raised from, oldest first."""
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    chain.reverse()
    return chain


class Client:
    """Event capture client.

    One instance holds one immutable CaptureOptions and the stack-trace
    factory built from it.
    """

    def __init__(
        self,
        options: Optional[CaptureOptions] = None,
        stacktrace_factory: Optional[StackTraceFactory] = None,
    ):
        self.options = options or CaptureOptions()
        self._stacktraces = stacktrace_factory or StackTraceFactory(self.options)

    def event_from_exception(self, exc: BaseException, level: Level = "error") -> Event:
        values = [
            ExceptionValue(
                type=type(e).__name__,
                value=str(e) or None,
                module=type(e).__module__,
                stacktrace=self._stacktraces.create(e),
            )
            for e in _exception_chain(exc)
        ]
        return Event(level=level, exception=ExceptionList(values=values))

    def event_from_message(self, message: str, level: Level = "info") -> Event:
        """Message event; carries the caller's stack when ``attach_stacktrace`` is on."""
        return Event(level=level, message=message, stacktrace=self._stacktraces.create())

    def capture_exception(self, exc: BaseException) -> Envelope:
        return self.envelope_for(self.event_from_exception(exc))

    def capture_message(self, message: str, level: Level = "info") -> Envelope:
        return self.envelope_for(self.event_from_message(message, level))

    @staticmethod
    def envelope_for(event: Event) -> Envelope:
        return EnvelopeBuilder().add_event_item(event).build()

    @staticmethod
    def write(envelope: Envelope, sink: BinarySink) -> None:
        serialize_envelope(envelope, sink)

    @staticmethod
    async def write_async(envelope: Envelope, writer: AsyncBinarySink) -> None:
        await serialize_envelope_async(envelope, writer)
