"""
Shared utilities for REZGEN.

Common functionality used across contexts:
- Logger configuration
- Status codes and error handler interface
"""

from rezgen.utils.status import ErrorHandler, Status, error_callback

__all__ = ["ErrorHandler", "Status", "error_callback"]
