"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from rezgen.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, pdf_engine: str = None, console_level: str = "INFO") -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        pdf_engine: PDF engine name for provenance
        console_level: Minimum level shown on the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"PDF engine": pdf_engine},
        console_level=console_level,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_generation_start(output_file: Path, theme_name: str, fmt: str) -> None:
    """Log start of a generation run with context."""
    _log_info(f"Generating {fmt}: {output_file}")
    _log_debug(f"  Theme: {theme_name}")


def log_pdf_result(result, elapsed_time: float, verbose: bool = False) -> None:
    """
    Log PDF rasterization result with diagnostics.

    Args:
        result: PdfResult from render_pdf()
        elapsed_time: Time taken to render
        verbose: Log full engine output even on success
    """
    engine = result.engine.value if result.engine else "unknown"

    if result.success:
        _log_success(f"PDF rendered with {engine} ({elapsed_time:.2f}s)")
        _log_debug(f"  PDF: {result.pdf_path}")
    else:
        _log_error(f"PDF rendering failed with {engine}: {result.status.name} ({elapsed_time:.2f}s)")
        if result.error:
            _log_error(f"  {result.error}")

    # Use opt(raw=True) so multi-line engine output keeps its formatting
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\n{engine.upper()} STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\n{engine.upper()} STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )


def log_generation_result(result, elapsed_time: float) -> None:
    """
    Log the outcome of generate().

    Args:
        result: GenerationResult from generate()
        elapsed_time: Time taken for the whole run
    """
    if result.success:
        _log_success(f"{result.output_file}: generated ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{result.output_file}: generation failed ({elapsed_time:.2f}s)")
        for error in result.errors[:10]:
            _log_error(f"  {error}")
        if len(result.errors) > 10:
            _log_error(f"  ... and {len(result.errors) - 10} more errors")
