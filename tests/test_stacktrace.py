"""StackTraceFactory: capture, elision, ordering and real interpreter frames."""

import gc
import os
import sys
import weakref

import pytest

from faultpack.options import CaptureOptions
from faultpack.stacktrace.capture import MethodIdentity, RawFrame, capture_frames
from faultpack.stacktrace.factory import StackTraceFactory

requires_qualname = pytest.mark.skipif(sys.version_info < (3, 11), reason="needs code.co_qualname")


class FakeCapture:
    def __init__(self, frames, is_current):
        self.frames = frames
        self.is_current = is_current
        self.calls = []

    def __call__(self, target):
        self.calls.append(target)
        return self.frames, self.is_current


def raw(name):
    # The filename doubles as the lookup key for the fake resolver.
    return RawFrame(filename=name, lineno=1)


IDENTITIES = {
    "sdk_capture": MethodIdentity("faultpack.stacktrace.factory.StackTraceFactory", "faultpack", "create"),
    "sdk_client": MethodIdentity("faultpack.client.Client", "faultpack", "capture_message"),
    "handler": MethodIdentity("shop.views", "shop", "checkout"),
    "service": MethodIdentity("shop.orders.OrderService", "shop", "submit"),
    "sdk_hook": MethodIdentity("faultpack.client.Client", "faultpack", "event_from_exception"),
    "lookalike": MethodIdentity("faultpackage.util", "faultpackage", "helper"),
    "anonymous": None,
}


def make_factory(frames, is_current, **options):
    capture = FakeCapture(frames, is_current)
    factory = StackTraceFactory(
        CaptureOptions(**options),
        capture=capture,
        method_resolver=lambda r: IDENTITIES[r.filename],
    )
    return factory, capture


class TestDecision:
    def test_no_exception_and_attach_off_skips_capture(self):
        factory, capture = make_factory([raw("handler")], True)
        assert factory.create() is None
        assert capture.calls == []

    def test_no_exception_and_attach_on_captures_current_point(self):
        factory, capture = make_factory([raw("handler")], True, attach_stacktrace=True)
        trace = factory.create()
        assert capture.calls == [None]
        assert [f.function for f in trace.frames] == ["checkout"]

    def test_exception_is_captured_regardless_of_attach(self):
        err = ValueError("x")
        factory, capture = make_factory([raw("handler")], False)
        assert factory.create(err) is not None
        assert capture.calls == [err]


class TestAssembly:
    def test_outermost_frame_first(self):
        factory, _ = make_factory([raw("service"), raw("handler")], False)
        trace = factory.create(ValueError())
        assert [f.function for f in trace.frames] == ["checkout", "submit"]

    def test_reversed_output_reproduces_capture_order(self):
        names = ["service", "sdk_hook", "handler", "anonymous"]
        factory, _ = make_factory([raw(n) for n in names], False)
        trace = factory.create(ValueError())
        assert [f.filename for f in reversed(trace.frames)] == names

    def test_leading_sdk_frames_elided_for_current_point(self):
        frames = [raw("sdk_capture"), raw("sdk_client"), raw("handler"), raw("sdk_hook"), raw("service")]
        factory, _ = make_factory(frames, True, attach_stacktrace=True)
        trace = factory.create()
        assert [f.filename for f in trace.frames] == ["service", "sdk_hook", "handler"]

    def test_sdk_frames_kept_for_exceptions(self):
        factory, _ = make_factory([raw("sdk_hook"), raw("handler")], False)
        trace = factory.create(ValueError())
        assert [f.filename for f in trace.frames] == ["handler", "sdk_hook"]

    def test_unresolvable_leading_frame_stops_elision(self):
        factory, _ = make_factory([raw("anonymous"), raw("sdk_capture")], True, attach_stacktrace=True)
        trace = factory.create()
        assert [f.filename for f in trace.frames] == ["sdk_capture", "anonymous"]

    def test_prefix_lookalike_is_not_elided(self):
        factory, _ = make_factory([raw("lookalike")], True, attach_stacktrace=True)
        trace = factory.create()
        assert [f.module for f in trace.frames] == ["faultpackage.util"]

    def test_only_sdk_frames_yields_none(self):
        factory, _ = make_factory([raw("sdk_capture"), raw("sdk_client")], True, attach_stacktrace=True)
        assert factory.create() is None

    def test_empty_capture_yields_none(self):
        factory, _ = make_factory([], False)
        assert factory.create(ValueError()) is None

    def test_unavailable_frames_yield_none(self):
        factory, _ = make_factory(None, True, attach_stacktrace=True)
        assert factory.create() is None

    def test_in_app_rules_applied(self):
        factory, _ = make_factory([raw("service"), raw("handler")], False, in_app_exclude=("shop.",),
                                  in_app_include=("shop.orders",))
        trace = factory.create(ValueError())
        assert [(f.module, f.in_app) for f in trace.frames] == [
            ("shop.views", False),
            ("shop.orders.OrderService", True),
        ]


def _raise_inner():
    raise ValueError("boom")


def _call_outer():
    _raise_inner()


def _run_callback():
    callback = lambda: 1 / 0  # noqa: E731
    callback()


def _run_nested():
    def inner():
        callback = lambda: 1 / 0  # noqa: E731
        callback()

    inner()


class Payload:
    pass


def _capture_with_local():
    payload = Payload()
    ref = weakref.ref(payload)
    trace = StackTraceFactory(CaptureOptions(attach_stacktrace=True)).create()
    return ref, trace


class OrderService:
    def submit(self):
        raise RuntimeError("declined")


def _caught(fn):
    try:
        fn()
    except Exception as e:
        return e
    raise AssertionError("expected an exception")


class TestInterpreterFrames:
    def test_exception_frames_outermost_first(self):
        exc = _caught(_call_outer)
        trace = StackTraceFactory(CaptureOptions()).create(exc)
        assert [f.function for f in trace.frames] == ["_caught", "_call_outer", "_raise_inner"]

        failing = trace.frames[-1]
        assert failing.module == __name__
        assert os.path.basename(failing.filename) == os.path.basename(__file__)
        assert failing.lineno == _raise_inner.__code__.co_firstlineno + 1
        assert failing.in_app is True
        assert failing.package is not None

    def test_exception_never_raised(self):
        assert StackTraceFactory(CaptureOptions()).create(ValueError("fresh")) is None

    def test_capture_frames_is_innermost_first(self):
        frames, is_current = capture_frames(_caught(_call_outer))
        assert is_current is False
        assert [f.code.co_name for f in frames] == ["_raise_inner", "_call_outer", "_caught"]

    def test_current_point_starts_at_caller(self):
        trace = StackTraceFactory(CaptureOptions(attach_stacktrace=True)).create()
        assert trace.frames[-1].function == "test_current_point_starts_at_caller"
        assert trace.frames[-1].module in (__name__, f"{__name__}.TestInterpreterFrames")
        assert not any(f.module.startswith("faultpack.") for f in trace.frames)

    def test_excluded_modules(self):
        exc = _caught(_call_outer)
        trace = StackTraceFactory(CaptureOptions(in_app_exclude=(__name__,))).create(exc)
        assert not any(f.in_app for f in trace.frames)

    @requires_qualname
    def test_method_module_includes_class(self):
        exc = _caught(OrderService().submit)
        failing = StackTraceFactory(CaptureOptions()).create(exc).frames[-1]
        assert failing.module == f"{__name__}.OrderService"
        assert failing.function == "submit"

    @requires_qualname
    def test_lambda_attributed_to_enclosing_function(self):
        exc = _caught(_run_callback)
        failing = StackTraceFactory(CaptureOptions()).create(exc).frames[-1]
        assert failing.module == __name__
        assert failing.function == "_run_callback { <lambda> }"

    @requires_qualname
    def test_nested_lambda_folds_every_scope(self):
        exc = _caught(_run_nested)
        failing = StackTraceFactory(CaptureOptions()).create(exc).frames[-1]
        assert failing.module == __name__
        assert failing.function == "_run_nested { inner { <lambda> } }"

    @requires_qualname
    def test_column_recorded_with_line(self):
        exc = _caught(_call_outer)
        failing = StackTraceFactory(CaptureOptions()).create(exc).frames[-1]
        assert failing.colno is not None and failing.colno >= 1
        assert failing.instruction_offset is not None

    def test_capture_does_not_keep_caller_locals_alive(self):
        gc.disable()
        try:
            ref, trace = _capture_with_local()
            assert trace.frames[-1].function == "_capture_with_local"
            assert ref() is None
        finally:
            gc.enable()

    def test_raw_frames_hold_no_live_frames(self):
        frames, _ = capture_frames()
        assert frames[0].code.co_name == "test_raw_frames_hold_no_live_frames"
        assert frames[0].module_name == __name__
        assert not hasattr(frames[0], "frame")
