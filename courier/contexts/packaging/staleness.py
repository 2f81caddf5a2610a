"""
Staleness checks for derived artifacts.

A derived artifact sits next to its source with the same stem and a different
extension (resume.tex -> resume.pdf). It is fresh when it exists and was modified
no earlier than its source.
"""

from pathlib import Path
from typing import Union


def derived_path(source: Union[str, Path], extension: str = ".pdf") -> Path:
    """Expected artifact path for a source: same directory and stem, new extension."""
    source = Path(source)
    return source.parent / f"{source.stem}{extension}"


def is_fresh(source: Union[str, Path], derived: Union[str, Path]) -> bool:
    """
    Check whether a derived artifact is up to date with its source.

    Equal modification times count as fresh.

    Args:
        source: Path to the source document
        derived: Path to the artifact generated from it

    Returns:
        True if the artifact exists and is at least as new as the source

    Raises:
        OSError: If the source can't be stat'ed, or the artifact stat fails
            for a reason other than the file being absent
    """
    try:
        derived_mtime = Path(derived).stat().st_mtime_ns
    except (FileNotFoundError, NotADirectoryError):
        # Never built: the normal trigger for compilation
        return False

    source_mtime = Path(source).stat().st_mtime_ns
    return derived_mtime >= source_mtime
