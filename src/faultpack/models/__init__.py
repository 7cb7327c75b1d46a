from faultpack.models.envelope import Envelope, EnvelopeHeaders, EnvelopeItem, EnvelopePayload
from faultpack.models.event import Event, ExceptionList, ExceptionValue
from faultpack.models.frame import UNKNOWN_MODULE, StackFrame, StackTrace

__all__ = [
    "Envelope",
    "EnvelopeHeaders",
    "EnvelopeItem",
    "EnvelopePayload",
    "Event",
    "ExceptionList",
    "ExceptionValue",
    "StackFrame",
    "StackTrace",
    "UNKNOWN_MODULE",
]
