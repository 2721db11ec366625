"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
Sinks are configured once per run by setup_rendering_logger; templating modules
only emit through the wrappers below.
"""

from loguru import logger

CONTEXT_PREFIX = "[template]"


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_materialize_result(theme_name: str, fmt: str, result) -> None:
    """
    Log a summary of one materialize() pass.

    Args:
        theme_name: Theme identifier
        fmt: Format that was materialized
        result: MaterializeResult from materialize()
    """
    summary = (
        f"{theme_name}/{fmt}: {len(result.written)} written, {len(result.copied)} copied, "
        f"{len(result.linked)} linked, {len(result.skipped)} skipped"
    )
    if result.success:
        _log_success(summary)
    else:
        _log_error(f"{summary}, {len(result.failures)} failed")
        for path, status, message in result.failures:
            _log_error(f"  {status.name}: {path}: {message}")
