"""
Loguru setup shared by every build run.

Each build writes a full DEBUG transcript to <log_dir>/<context>.log (cache hits,
process commands, stage transitions) while stdout shows only the console level.
The packaging context wraps this in contexts/packaging/logger.py.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from courier import __version__

# Console colors for levels a build can end on
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, str]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Point loguru at a fresh build log directory and the console.

    Replaces any existing sinks, so calling it again starts a new transcript.
    The log opens with a header recording how the build was invoked.

    Args:
        context_name: Context identifier (e.g., "package")
        log_dir: Directory for this logging session
        extra_provenance: Extra header lines, e.g. which LaTeX compiler is configured
        level_colors: Override default level colors (e.g., {"INFO": "<cyan>"})
        console_level: Minimum level shown on stdout (file always gets DEBUG)

    Returns:
        Path to log file

    Example:
        from courier.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="package",
            log_dir=Path("outs/logs/build_20251114_123456"),
            extra_provenance={"LaTeX compiler": "pdflatex"}
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    colors = {**LEVEL_COLORS, **(level_colors or {})}
    for level_name, color in colors.items():
        logger.level(level_name, color=color)

    # File handler captures everything, including cache hits and process output
    logger.add(
        log_file, format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}", level="DEBUG"
    )

    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>",
        level=console_level,
        colorize=True,
    )

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[Dict[str, str]] = None) -> None:
    """
    Write the build header: invocation, working directory, interpreter and
    any tool settings passed in extra_context.
    """
    logger.info("=" * 80)
    logger.info(f"Courier {__version__}")
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
