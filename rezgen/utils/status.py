"""Status codes and the error handler interface shared by all contexts."""

from enum import IntEnum
from typing import Callable, Optional

from typing_extensions import Protocol, runtime_checkable


class Status(IntEnum):
    """Outcome codes reported to error handlers and stored on results."""

    SUCCESS = 0
    THEME_NOT_FOUND = 1
    FORMAT_NOT_SUPPORTED = 2
    TEMPLATE_ENGINE_UNKNOWN = 3
    TEMPLATE_RENDER = 4
    FILE_WRITE = 5
    FILE_COPY = 6
    SYMLINK = 7
    PDF_ENGINE_UNKNOWN = 8
    PDF_GENERATION = 9


@runtime_checkable
class ErrorHandler(Protocol):
    """Anything with an ``err(status, cause)`` method can receive failures."""

    def err(self, status: Status, cause: Optional[BaseException]) -> None: ...


# Signature of the callback handed to the PDF dispatcher
ErrorCallback = Callable[[Status, Optional[BaseException]], None]


def error_callback(handler: Optional[ErrorHandler]) -> Optional[ErrorCallback]:
    """Return the handler's ``err`` method, or None when there is no usable handler."""
    if handler is None or not isinstance(handler, ErrorHandler):
        return None
    return handler.err
