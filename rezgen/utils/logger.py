"""
Shared loguru setup for rezgen runs.

Each run gets a timestamped log file holding every message, plus a colorized
console stream. Contexts emit through their own contexts/{context}/logger.py.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

import rezgen

CONSOLE_COLORS = {
    "DEBUG": "<dim>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Mapping[str, object]] = None,
    level_colors: Optional[Mapping[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output to a per-run log file and the console.

    Any sinks configured earlier (including loguru's default stderr sink) are
    replaced, so calling this twice in one process does not duplicate output.

    Args:
        context_name: Prefix of the log file name (e.g., "render")
        log_dir: Directory receiving the log file; created if missing
        extra_provenance: Run details for the header; None values are omitted
        level_colors: Console colors overriding CONSOLE_COLORS
        console_level: Minimum level shown on the console (file sink keeps DEBUG)

    Returns:
        Path to the log file, e.g. log_dir/render_20260101_120000.log
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}_{datetime.now():%Y%m%d_%H%M%S}.log"

    logger.remove()
    for level_name, color in {**CONSOLE_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: Optional[Mapping[str, object]] = None) -> None:
    """Write a header describing the run: rezgen version, command line and cwd."""
    details = {
        "rezgen": rezgen.__version__,
        "Python": sys.version.split()[0],
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        **(extra_context or {}),
    }

    logger.info("-" * 60)
    for key, value in details.items():
        if value is not None:
            logger.info(f"{key}: {value}")
    logger.info("-" * 60)
