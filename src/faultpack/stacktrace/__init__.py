from faultpack.stacktrace.capture import MethodIdentity, RawFrame, capture_frames, resolve_method
from faultpack.stacktrace.factory import StackTraceFactory
from faultpack.stacktrace.normalizer import FrameNormalizer, is_in_app

__all__ = [
    "FrameNormalizer",
    "MethodIdentity",
    "RawFrame",
    "StackTraceFactory",
    "capture_frames",
    "is_in_app",
    "resolve_method",
]
