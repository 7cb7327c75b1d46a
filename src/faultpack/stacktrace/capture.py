"""
Raw call-stack capture.

Frames are always produced innermost first: the frame that raised (or the
frame that asked for the capture) comes first, its callers after it.
"""

import inspect
import traceback
from dataclasses import dataclass
from collections.abc import Iterator
from types import CodeType, FrameType, TracebackType
from typing import Callable, Optional

RawFrames = Optional[list["RawFrame"]]


@dataclass(frozen=True)
class MethodIdentity:
    declaring_type: Optional[str]
    package: Optional[str]
    name: str


@dataclass(frozen=True)
class RawFrame:
    """A snapshot of one interpreter frame. Zero means unknown for the numeric fields.

    The live frame is not kept: holding it would keep every local on the
    stack alive past the capture.
    """
    code: Optional[CodeType] = None
    module_name: Optional[str] = None
    package_name: Optional[str] = None
    filename: Optional[str] = None
    lineno: int = 0
    colno: int = 0
    instruction_offset: int = 0

    @classmethod
    def from_frame(cls, frame: FrameType, lineno: Optional[int], lasti: int) -> "RawFrame":
        code = frame.f_code
        offset = max(lasti, 0)
        return cls(
            code=code,
            module_name=frame.f_globals.get("__name__"),
            package_name=frame.f_globals.get("__package__"),
            filename=code.co_filename or None,
            lineno=lineno or 0,
            colno=_column_for_offset(code, offset),
            instruction_offset=offset,
        )


MethodResolver = Callable[[RawFrame], Optional[MethodIdentity]]
FrameCapture = Callable[[Optional[BaseException]], tuple[RawFrames, bool]]


def _column_for_offset(code: CodeType, offset: int) -> int:
    positions = getattr(code, "co_positions", None)
    if positions is None:
        return 0
    # co_positions() yields one entry per two-byte code unit.
    for index, (_, _, col, _) in enumerate(positions()):
        if index == offset // 2:
            return col + 1 if col is not None else 0
    return 0


def resolve_method(raw: RawFrame) -> Optional[MethodIdentity]:
    """Derive the declaring type, package and function name of a frame."""
    if raw.code is None:
        return None
    code = raw.code
    module_name = raw.module_name
    qualname = getattr(code, "co_qualname", code.co_name)
    parent = qualname.rpartition(".")[0]

    declaring_type = None
    if module_name:
        declaring_type = f"{module_name}.{parent}" if parent else module_name

    package = raw.package_name or module_name
    return MethodIdentity(
        declaring_type=declaring_type,
        package=package.partition(".")[0] if package else None,
        name=code.co_name,
    )


def capture_frames(target: Optional[BaseException] = None) -> tuple[RawFrames, bool]:
    """Capture the frames of ``target``'s traceback, or of the caller when ``target`` is None.

    Returns ``(frames, is_current_execution_point)``. ``frames`` is None when
    the interpreter cannot provide frames at all and empty when the exception
    was never raised.
    """
    if target is not None:
        frames = [RawFrame.from_frame(tb.tb_frame, tb.tb_lineno, tb.tb_lasti)
                  for tb in _walk_tb(target.__traceback__)]
        frames.reverse()
        return frames, False

    current = inspect.currentframe()
    if current is None:
        return None, True
    caller = current.f_back
    del current
    if caller is None:
        return [], True
    return [
        RawFrame.from_frame(frame, lineno, frame.f_lasti)
        for frame, lineno in traceback.walk_stack(caller)
    ], True


def _walk_tb(tb: Optional[TracebackType]) -> Iterator[TracebackType]:
    while tb is not None:
        yield tb
        tb = tb.tb_next
