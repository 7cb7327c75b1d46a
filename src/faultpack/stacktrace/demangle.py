"""
Demangling of compiler-synthesized names back to source-level names.

Each rule is a pure function. Input that does not match is returned as is.
"""

import re
from typing import Optional

ASYNC_STEP_FUNCTION = "MoveNext"

# RemotePrinterService+<UpdateNotification>d__24
_ASYNC_STATE_MACHINE = re.compile(r"^(.*)\+<(\w*)>d__\d*$")
# <BeginInvokeAsynchronousActionMethod>b__36
_ANONYMOUS_FUNCTION = re.compile(r"^<(\w*)>b__\w+$")
# shop.jobs.run.<locals>
_LOCAL_SCOPE = re.compile(r"^(.*)\.(\w+)\.<locals>$")


def demangle_async_function_name(
    module: Optional[str], function: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    """Fold an async state machine's ``MoveNext`` back into the method that declared it.

    ``("RemotePrinterService+<UpdateNotification>d__24", "MoveNext")`` becomes
    ``("RemotePrinterService", "UpdateNotification")``.
    """
    if module is None or function != ASYNC_STEP_FUNCTION:
        return module, function
    match = _ASYNC_STATE_MACHINE.match(module)
    # An empty outer type would leave the frame without a module.
    if match is None or not match.group(1):
        return module, function
    return match.group(1), match.group(2)


def demangle_anonymous_function(function: Optional[str]) -> Optional[str]:
    """``<Handle>b__12`` becomes ``Handle { <lambda> }``."""
    if function is None:
        return None
    match = _ANONYMOUS_FUNCTION.match(function)
    if match is None:
        return function
    return f"{match.group(1)} {{ <lambda> }}"


def demangle_local_function(
    module: Optional[str], function: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    """Attribute a function defined inside another function to its enclosing scope.

    ``("shop.jobs.run.<locals>", "<lambda>")`` becomes
    ``("shop.jobs", "run { <lambda> }")``. Each nesting level is folded, so
    ``("shop.jobs.run.<locals>.inner.<locals>", "<lambda>")`` becomes
    ``("shop.jobs", "run { inner { <lambda> } }")``.
    """
    if module is None or function is None:
        return module, function
    while True:
        match = _LOCAL_SCOPE.match(module)
        if match is None or not match.group(1):
            return module, function
        module, function = match.group(1), f"{match.group(2)} {{ {function} }}"
