"""
Capture options: the immutable configuration value handed to every
stack-trace and envelope operation.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

SDK_NAME = "faultpack"


def _default_logger() -> logging.Logger:
    return logging.getLogger(SDK_NAME)


class CaptureOptions(BaseModel):
    """Read-only settings shared by a client's capture pipeline.

    ``in_app_include`` / ``in_app_exclude`` are ordered module-name prefixes.
    ``logger`` receives debug notices; set it to ``None`` to silence them.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    in_app_include: Optional[tuple[str, ...]] = None
    in_app_exclude: Optional[tuple[str, ...]] = None
    attach_stacktrace: bool = False
    logger: Optional[logging.Logger] = Field(default_factory=_default_logger)

    def log_debug(self, message: str, *args: object) -> None:
        if self.logger is not None:
            self.logger.debug(message, *args)
