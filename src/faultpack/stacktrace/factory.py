"""
StackTraceFactory: captures, filters, normalizes and orders call-stack frames.

Capture, method resolution and normalization are pluggable callables so a
host can swap any of them without subclassing:

    factory = StackTraceFactory(options, capture=my_capture)
    trace = factory.create(exc)
"""

from typing import Optional

from faultpack.models.frame import StackFrame, StackTrace
from faultpack.options import SDK_NAME, CaptureOptions
from faultpack.stacktrace.capture import (
    FrameCapture,
    MethodResolver,
    RawFrames,
    capture_frames,
    resolve_method,
)
from faultpack.stacktrace.normalizer import FrameNormalizer


def _is_sdk_type(declaring_type: Optional[str]) -> bool:
    return declaring_type is not None and (
        declaring_type == SDK_NAME or declaring_type.startswith(SDK_NAME + ".")
    )


class StackTraceFactory:
    def __init__(
        self,
        options: CaptureOptions,
        capture: FrameCapture = capture_frames,
        method_resolver: MethodResolver = resolve_method,
        normalizer: Optional[FrameNormalizer] = None,
    ):
        self._options = options
        self._capture = capture
        self._resolve_method = method_resolver
        self._normalizer = normalizer or FrameNormalizer(options, method_resolver)

    def create(self, exception: Optional[BaseException] = None) -> Optional[StackTrace]:
        """Stack trace of ``exception``, or of the caller when ``attach_stacktrace`` is on.

        Returns None when there is nothing to report.
        """
        if exception is None and not self._options.attach_stacktrace:
            self._options.log_debug("No exception and attach_stacktrace is off. No stack trace will be collected.")
            return None

        raw_frames, is_current = self._capture(exception)
        self._options.log_debug("Creating stack trace. is_current_stack_trace: %s.", is_current)
        return self.from_raw_frames(raw_frames, is_current)

    def from_raw_frames(self, raw_frames: RawFrames, is_current: bool) -> Optional[StackTrace]:
        frames = self.create_frames(raw_frames, is_current)
        # Outermost caller first, failing frame last.
        frames.reverse()
        if not frames:
            return None
        return StackTrace(frames=tuple(frames))

    def create_frames(self, raw_frames: RawFrames, is_current: bool) -> list[StackFrame]:
        """Normalize innermost-first raw frames, hiding the capture call itself."""
        if raw_frames is None:
            self._options.log_debug(
                "No stack frames found. attach_stacktrace: '%s', is_current_stack_trace: '%s'",
                self._options.attach_stacktrace, is_current,
            )
            return []

        frames: list[StackFrame] = []
        leading = is_current
        for raw in raw_frames:
            if leading:
                method = self._resolve_method(raw)
                if method is not None and _is_sdk_type(method.declaring_type):
                    continue
                leading = False
            frames.append(self._normalizer.normalize(raw, demangle=True))
        return frames
