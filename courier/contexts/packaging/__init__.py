"""
Packaging Context

Responsibilities:
- Names packages by recipient and source content fingerprint
- Decides whether compiled PDFs are stale
- Compiles cover letter and resume concurrently
- Merges compiled documents into a single package PDF

Owns: Package identity, derived artifact freshness, compile/merge orchestration
Never: Loads job configuration, uploads or publishes packages
"""

from courier.contexts.packaging.composer import (
    BuildStage,
    Package,
    build_package,
    compile_sources,
    compose,
)
from courier.contexts.packaging.exceptions import CompileError, MergeError, PackagingError
from courier.contexts.packaging.fingerprint import generate_hash, package_name, to_param_case
from courier.contexts.packaging.staleness import derived_path, is_fresh
from courier.contexts.packaging.transforms import (
    GhostscriptMerger,
    LatexCompiler,
    ProcessResult,
    run_process,
)

__all__ = [
    # Orchestration
    "compose",
    "compile_sources",
    "build_package",
    "Package",
    "BuildStage",
    # Identity
    "generate_hash",
    "package_name",
    "to_param_case",
    # Freshness
    "derived_path",
    "is_fresh",
    # Default transforms
    "LatexCompiler",
    "GhostscriptMerger",
    "ProcessResult",
    "run_process",
    # Errors
    "PackagingError",
    "CompileError",
    "MergeError",
]
