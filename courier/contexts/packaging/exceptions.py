"""Custom exceptions for the packaging context with process diagnostics."""

from typing import Optional, Sequence

STDERR_TAIL_CHARS = 500


class PackagingError(Exception):
    """
    Base exception for external transform failures.

    Attributes:
        message: Error description
        command: Command line that was run (or attempted)
        cause: ProcessResult of the failed run, or the exception raised at launch
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        cause: Optional[object] = None,
    ):
        self.message = message
        self.command = list(command) if command is not None else None
        self.cause = cause

        # Build enhanced error message
        parts = [message]

        if self.command:
            parts.append(f"Command: {' '.join(str(arg) for arg in self.command)}")

        if isinstance(cause, Exception):
            parts.append(f"Original error: {cause}")
        elif cause is not None:
            returncode = getattr(cause, "returncode", None)
            stderr = getattr(cause, "stderr", "") or ""
            if returncode is not None:
                parts.append(f"Exit status: {returncode}")
            if stderr.strip():
                tail = stderr.strip()[-STDERR_TAIL_CHARS:]
                parts.append(f"stderr:\n{tail}")

        super().__init__("\n".join(parts))


class CompileError(PackagingError):
    """Raised when the LaTeX compiler fails to launch or exits non-zero."""

    pass


class MergeError(PackagingError):
    """Raised when the PDF merger fails to launch or exits non-zero."""

    pass
