"""
Compile and merge transforms.

Two pluggable strategies drive a package build:
    Compiler: one source document -> one derived artifact
    Merger:   ordered artifacts    -> one combined artifact

The defaults shell out to pdflatex and Ghostscript through a ProcessRunner, which
can be swapped for a test double (or another toolchain) without touching either
strategy.
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from dotenv import load_dotenv

from courier.contexts.packaging.exceptions import CompileError, MergeError
from courier.contexts.packaging.logger import _log_debug, _log_info
from courier.contexts.packaging.staleness import derived_path, is_fresh

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
PDF_MERGER = os.getenv("PDF_MERGER", "gs")
OUTPUT_EXTENSION = os.getenv("OUTPUT_EXTENSION", ".pdf")


@dataclass
class ProcessResult:
    """
    Outcome of an external process run.

    Attributes:
        command: Command line that was run
        returncode: Exit status (0 on success)
        stdout: Standard output
        stderr: Standard error
    """

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    def __call__(self, command: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult: ...


class Compiler(Protocol):
    def __call__(self, source: Path) -> Path: ...


class Merger(Protocol):
    def __call__(self, artifacts: Sequence[Path]) -> Path: ...


def run_process(command: Sequence[str], cwd: Optional[Path] = None) -> ProcessResult:
    """
    Run an external command to completion and capture its output.

    Non-zero exit statuses are reported in the result, not raised.

    Raises:
        OSError: If the executable can't be launched (e.g., not installed)
    """
    command = [str(arg) for arg in command]
    result = subprocess.run(
        command,
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",  # pdflatex output mixes in latin-1 font metadata
    )
    return ProcessResult(
        command=command,
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


class LatexCompiler:
    """
    Default compile transform: .tex -> .pdf, skipped when the PDF is fresh.

    The compiler runs in the source's directory so document classes and \\input
    files next to the source resolve.

    Args:
        command: LaTeX executable (default: LATEX_COMPILER env, "pdflatex")
        extension: Extension of the derived artifact (default: OUTPUT_EXTENSION env, ".pdf")
        runner: Process runner (default: run_process)
    """

    def __init__(
        self,
        command: Optional[str] = None,
        extension: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.command = command or LATEX_COMPILER
        self.extension = extension or OUTPUT_EXTENSION
        self.runner = runner or run_process

    def __call__(self, source: Path) -> Path:
        source = Path(source).resolve()
        expected = derived_path(source, self.extension)

        if is_fresh(source, expected):
            _log_debug(f"Up to date, skipping compilation: {expected.name}")
            return expected

        command = [self.command, "-interaction=nonstopmode", source.name]
        _log_info(f"Compiling {source.name}")
        _log_debug(f"  Command: {' '.join(command)} (cwd: {source.parent})")

        try:
            result = self.runner(command, cwd=source.parent)
        except OSError as e:
            raise CompileError(f"Could not launch {self.command}", command, e) from e

        if not result.success:
            raise CompileError(f"Compilation failed: {source.name}", command, result)

        return expected


class GhostscriptMerger:
    """
    Default merge transform: concatenates PDFs with Ghostscript.

    The output is written next to the first artifact and named after the
    recipient (e.g., letters/jane-doe.pdf).

    Args:
        recipient_label: Base name of the merged file
        command: Ghostscript executable (default: PDF_MERGER env, "gs")
        extension: Extension of the merged file (default: OUTPUT_EXTENSION env, ".pdf")
        runner: Process runner (default: run_process)
    """

    def __init__(
        self,
        recipient_label: str,
        command: Optional[str] = None,
        extension: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.recipient_label = recipient_label
        self.command = command or PDF_MERGER
        self.extension = extension or OUTPUT_EXTENSION
        self.runner = runner or run_process

    def output_path(self, artifacts: Sequence[Path]) -> Path:
        return Path(artifacts[0]).parent / f"{self.recipient_label}{self.extension}"

    def __call__(self, artifacts: Sequence[Path]) -> Path:
        if not artifacts:
            raise ValueError("Nothing to merge: no artifacts given")

        output_file = self.output_path(artifacts)
        command = [
            self.command,
            "-dBATCH",
            "-dNOPAUSE",
            "-q",
            "-sDEVICE=pdfwrite",
            f"-sOutputFile={output_file}",
            *[str(artifact) for artifact in artifacts],
        ]
        _log_info(f"Merging {len(artifacts)} documents into {output_file.name}")
        _log_debug(f"  Command: {' '.join(command)}")

        try:
            result = self.runner(command)
        except OSError as e:
            raise MergeError(f"Could not launch {self.command}", command, e) from e

        if not result.success:
            raise MergeError(f"Merge failed: {output_file.name}", command, result)

        return output_file
