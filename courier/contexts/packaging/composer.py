"""
Package Composition Module

Compiles a cover letter and a resume concurrently, then merges the two PDFs into
one document named after the recipient.

Build stages:
    NOT_STARTED -> COMPILING -> MERGING -> DONE
                        \\          \\
                         +----------+--> FAILED

A failure at any stage ends the build; nothing is retried.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from courier.contexts.packaging.fingerprint import package_name, to_param_case
from courier.contexts.packaging.logger import (
    _log_debug,
    _log_info,
    log_build_result,
    log_build_start,
)
from courier.contexts.packaging.transforms import (
    Compiler,
    GhostscriptMerger,
    LatexCompiler,
    Merger,
)


class BuildStage(Enum):
    """Progress of a package build."""

    NOT_STARTED = "not_started"
    COMPILING = "compiling"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


def compile_sources(sources: Sequence[Path], compiler: Compiler) -> List[Path]:
    """
    Run the compiler on every source concurrently and wait for all of them.

    Fails fast: the first exception is re-raised as soon as it surfaces, and
    compilations still queued are cancelled. A compilation already running is
    not interrupted (its external process runs to completion), but its result
    is discarded.

    Args:
        sources: Source documents, in the order their artifacts should be returned
        compiler: Compile transform applied to each source

    Returns:
        Derived artifacts in the same order as sources
    """
    executor = ThreadPoolExecutor(
        max_workers=max(len(sources), 1), thread_name_prefix="courier-compile"
    )
    try:
        futures = {executor.submit(compiler, source): i for i, source in enumerate(sources)}
        artifacts: List[Optional[Path]] = [None] * len(sources)
        for future in as_completed(futures):
            # Raises the compiler's own exception on failure
            artifacts[futures[future]] = future.result()
    finally:
        # Don't block on a sibling still running after a failure
        executor.shutdown(wait=False, cancel_futures=True)

    return artifacts


def compose(
    coverletter: Union[str, Path],
    resume: Union[str, Path],
    recipient_label: Optional[str] = None,
    compiler: Optional[Compiler] = None,
    merger: Optional[Merger] = None,
) -> Path:
    """
    Compile the cover letter and resume, then merge them (cover letter first).

    Args:
        coverletter: Path to the cover letter source
        resume: Path to the resume source
        recipient_label: Name of the merged file, normalized to param-case
            (default: the cover letter's directory name)
        compiler: Compile transform (default: LatexCompiler())
        merger: Merge transform (default: GhostscriptMerger(recipient_label))

    Returns:
        Path to the merged document

    Raises:
        CompileError: If either source fails to compile (merge never runs)
        MergeError: If merging fails
    """
    coverletter = Path(coverletter)
    resume = Path(resume)

    if recipient_label is None:
        recipient_label = coverletter.resolve().parent.name
    recipient_label = to_param_case(recipient_label)
    compiler = compiler or LatexCompiler()
    merger = merger or GhostscriptMerger(recipient_label)

    artifacts = compile_sources([coverletter, resume], compiler)
    _log_debug(f"Compiled: {', '.join(str(a) for a in artifacts)}")

    return merger(artifacts)


class Package:
    """
    A personalized application package: cover letter + resume for one recipient.

    Usage:
        package = Package("Jane Doe", coverletter="letters/letter.tex", resume="cv/resume.tex")
        package.init()          # package.name -> "jane-doe_0790feebb1"
        package.make()          # package.compiled_files["package"] -> letters/jane-doe.pdf

    Args:
        recipient: Recipient's name (param-cased for the package and merged file names)
        coverletter: Path to the cover letter source
        resume: Path to the resume source
        compiler: Compile transform (default: LatexCompiler())
        merger: Merge transform (default: GhostscriptMerger named after the recipient)
    """

    def __init__(
        self,
        recipient: str,
        coverletter: Union[str, Path],
        resume: Union[str, Path],
        compiler: Optional[Compiler] = None,
        merger: Optional[Merger] = None,
    ):
        self.recipient = recipient
        self.recipient_label = to_param_case(recipient)
        self.coverletter = Path(coverletter)
        self.resume = Path(resume)
        self.compiler = compiler or LatexCompiler()
        self.merger = merger or GhostscriptMerger(self.recipient_label)

        self.name: Optional[str] = None
        self.compiled_files: Dict[str, Path] = {}
        self.stage = BuildStage.NOT_STARTED
        self.failed_stage: Optional[BuildStage] = None

    @property
    def sources(self) -> List[Path]:
        return [self.coverletter, self.resume]

    def init(self) -> str:
        """Compute the package name from the current source contents."""
        self.name = package_name(self.recipient, self.sources)
        return self.name

    def make(self) -> Path:
        """
        Compile both sources and merge them.

        Populates compiled_files with "letter", "resume" and "package" entries.

        Returns:
            Path to the merged document

        Raises:
            CompileError, MergeError, OSError: Propagated unchanged; stage is FAILED
                and failed_stage records where the build stopped
        """
        start_time = time.time()
        self.compiled_files = {}
        self.failed_stage = None

        try:
            if self.name is None:
                self.init()
            log_build_start(self.name, self.coverletter, self.resume)

            self._set_stage(BuildStage.COMPILING)
            letter_pdf, resume_pdf = compile_sources(self.sources, self.compiler)
            self.compiled_files.update(letter=letter_pdf, resume=resume_pdf)

            self._set_stage(BuildStage.MERGING)
            self.compiled_files["package"] = self.merger([letter_pdf, resume_pdf])
        except Exception as e:
            self.failed_stage = self.stage
            self._set_stage(BuildStage.FAILED)
            log_build_result(self, time.time() - start_time, error=e)
            raise

        self._set_stage(BuildStage.DONE)
        log_build_result(self, time.time() - start_time)
        return self.compiled_files["package"]

    def _set_stage(self, stage: BuildStage) -> None:
        _log_debug(f"{self.name}: {self.stage.value} -> {stage.value}")
        self.stage = stage


def build_package(
    recipient: str,
    coverletter: Union[str, Path],
    resume: Union[str, Path],
    compiler: Optional[Compiler] = None,
    merger: Optional[Merger] = None,
) -> Package:
    """
    Name and build a package in one call.

    Returns:
        The built Package (name, compiled_files and stage populated)
    """
    package = Package(recipient, coverletter, resume, compiler=compiler, merger=merger)
    package.init()
    _log_info(f"Package name: {package.name}")
    package.make()
    return package
