"""
Packaging context logger.

Provides logging interface for packaging context with automatic [package] prefix.
All packaging modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from courier.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[package]"


def setup_packaging_logger(log_dir: Path, verbose: bool = False) -> Path:
    """
    Setup logger for packaging context.

    Configures loguru with provenance tracking and the external tools in use.

    Args:
        log_dir: Directory for this build session
        verbose: Also show DEBUG messages (cache hits, commands) on the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="package",
        log_dir=log_dir,
        extra_provenance={
            "LaTeX compiler": os.getenv("LATEX_COMPILER", "pdflatex"),
            "PDF merger": os.getenv("PDF_MERGER", "gs"),
        },
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [package] prefix


def _log_info(message: str) -> None:
    """Log info message with [package] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [package] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [package] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [package] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [package] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level packaging-specific logging helpers


def log_build_start(package_name: str, coverletter: Path, resume: Path) -> None:
    """Log start of a package build with its sources."""
    _log_info(f"Building package: {package_name}")
    _log_debug(f"  Cover letter: {coverletter}")
    _log_debug(f"  Resume: {resume}")


def log_build_result(package, elapsed_time: float, error: Exception = None) -> None:
    """
    Log the outcome of a package build.

    Args:
        package: Package that was built (or attempted)
        elapsed_time: Time taken by the build
        error: Exception that aborted the build, if any
    """
    if error is None:
        _log_success(f"{package.name}: package built ({elapsed_time:.2f}s)")
        for role, path in package.compiled_files.items():
            _log_debug(f"  {role}: {path}")
    else:
        _log_error(f"{package.name or package.recipient_label}: build failed while {package.failed_stage.value} ({elapsed_time:.2f}s)")
        for line in str(error).splitlines():
            _log_error(f"  {line}")
