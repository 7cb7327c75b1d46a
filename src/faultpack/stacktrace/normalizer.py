"""
Frame normalization: raw interpreter frames to StackFrame records.
"""

from typing import Optional, Sequence

from faultpack.models.frame import UNKNOWN_MODULE, StackFrame
from faultpack.options import CaptureOptions
from faultpack.stacktrace.capture import MethodResolver, RawFrame, resolve_method
from faultpack.stacktrace.demangle import (
    demangle_anonymous_function,
    demangle_async_function_name,
    demangle_local_function,
)


def _matches_any(module: str, prefixes: Optional[Sequence[str]]) -> bool:
    return prefixes is not None and any(module.startswith(prefix) for prefix in prefixes)


def is_in_app(
    module: Optional[str],
    include: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> bool:
    """A module is application code unless it is excluded and not re-included."""
    if not module:
        return False
    return _matches_any(module, include) or not _matches_any(module, exclude)


class FrameNormalizer:
    def __init__(self, options: CaptureOptions, method_resolver: MethodResolver = resolve_method):
        self._options = options
        self._resolve_method = method_resolver

    def normalize(self, raw: RawFrame, demangle: bool = True) -> StackFrame:
        module = UNKNOWN_MODULE
        package = function = None
        method = self._resolve_method(raw)
        if method is not None:
            module = method.declaring_type or UNKNOWN_MODULE
            package = method.package
            function = method.name

        in_app = is_in_app(module, self._options.in_app_include, self._options.in_app_exclude)

        lineno = raw.lineno or None
        # A column is only meaningful alongside a line.
        colno = (raw.colno or None) if lineno else None

        if demangle:
            module, function = demangle_async_function_name(module, function)
            function = demangle_anonymous_function(function)
            module, function = demangle_local_function(module, function)

        return StackFrame(
            module=module,
            package=package,
            function=function,
            filename=raw.filename,
            lineno=lineno,
            colno=colno,
            instruction_offset=raw.instruction_offset or None,
            in_app=in_app,
        )
