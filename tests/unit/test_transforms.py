"""Unit tests for the default compile and merge transforms."""

import os
import sys
from pathlib import Path

import pytest

from courier.contexts.packaging.exceptions import CompileError, MergeError
from courier.contexts.packaging.transforms import (
    GhostscriptMerger,
    LatexCompiler,
    ProcessResult,
    run_process,
)

A_WHILE_AGO = 524_000_000
NOW = 1_760_000_000


class FakeRunner:
    """Records every command instead of launching it."""

    def __init__(self, returncode: int = 0, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def __call__(self, command, cwd=None):
        self.calls.append({"command": list(command), "cwd": cwd})
        return ProcessResult(command=list(command), returncode=self.returncode, stderr=self.stderr)


class MissingExecutableRunner:
    def __call__(self, command, cwd=None):
        raise FileNotFoundError(2, "No such file or directory", command[0])


def _touch(path: Path, mtime: int) -> Path:
    path.write_text("content")
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def tex_file(tmp_path):
    letters = tmp_path / "letters"
    letters.mkdir()
    return _touch(letters / "coverletter.tex", NOW)


@pytest.mark.unit
class TestLatexCompiler:
    """Tests for the default compile transform."""

    def test_compiles_when_pdf_missing(self, tex_file):
        runner = FakeRunner()
        compiler = LatexCompiler(command="pdflatex", runner=runner)

        result = compiler(tex_file)

        assert result == tex_file.resolve().with_suffix(".pdf")
        assert len(runner.calls) == 1
        assert runner.calls[0]["command"] == [
            "pdflatex",
            "-interaction=nonstopmode",
            "coverletter.tex",
        ]

    def test_runs_in_source_directory(self, tex_file):
        runner = FakeRunner()
        LatexCompiler(runner=runner)(tex_file)

        assert runner.calls[0]["cwd"] == tex_file.resolve().parent

    def test_skips_when_pdf_is_newer(self, tex_file):
        os.utime(tex_file, (A_WHILE_AGO, A_WHILE_AGO))
        pdf = _touch(tex_file.with_suffix(".pdf"), NOW)
        runner = FakeRunner()

        result = LatexCompiler(runner=runner)(tex_file)

        assert result == pdf.resolve()
        assert runner.calls == []

    def test_recompiles_when_pdf_is_older(self, tex_file):
        _touch(tex_file.with_suffix(".pdf"), A_WHILE_AGO)
        runner = FakeRunner()

        LatexCompiler(runner=runner)(tex_file)

        assert len(runner.calls) == 1

    def test_custom_extension(self, tex_file):
        runner = FakeRunner()

        result = LatexCompiler(command="latex", extension=".dvi", runner=runner)(tex_file)

        assert result == tex_file.resolve().with_suffix(".dvi")
        assert runner.calls[0]["command"][0] == "latex"

    def test_nonzero_exit_raises_compile_error(self, tex_file):
        runner = FakeRunner(returncode=1, stderr="! Undefined control sequence.")

        with pytest.raises(CompileError) as exc_info:
            LatexCompiler(runner=runner)(tex_file)

        error = exc_info.value
        assert error.command[-1] == "coverletter.tex"
        assert error.cause.returncode == 1
        assert "Exit status: 1" in str(error)
        assert "Undefined control sequence" in str(error)

    def test_launch_failure_raises_compile_error(self, tex_file):
        with pytest.raises(CompileError) as exc_info:
            LatexCompiler(command="no-such-latex", runner=MissingExecutableRunner())(tex_file)

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert exc_info.value.__cause__ is exc_info.value.cause


@pytest.mark.unit
class TestGhostscriptMerger:
    """Tests for the default merge transform."""

    def test_merges_in_given_order(self, tmp_path):
        letter = tmp_path / "letters" / "coverletter.pdf"
        resume = tmp_path / "cv" / "resume.pdf"
        runner = FakeRunner()

        result = GhostscriptMerger("test", command="gs", runner=runner)([letter, resume])

        expected_output = tmp_path / "letters" / "test.pdf"
        assert result == expected_output
        assert runner.calls[0]["command"] == [
            "gs",
            "-dBATCH",
            "-dNOPAUSE",
            "-q",
            "-sDEVICE=pdfwrite",
            f"-sOutputFile={expected_output}",
            str(letter),
            str(resume),
        ]

    def test_output_named_with_configured_extension(self, tmp_path):
        merger = GhostscriptMerger("jane-doe", extension=".ps", runner=FakeRunner())

        assert merger([tmp_path / "a.ps", tmp_path / "b.ps"]) == tmp_path / "jane-doe.ps"

    def test_nonzero_exit_raises_merge_error(self, tmp_path):
        runner = FakeRunner(returncode=1, stderr="Error: /undefinedfilename")

        with pytest.raises(MergeError) as exc_info:
            GhostscriptMerger("test", runner=runner)([tmp_path / "a.pdf", tmp_path / "b.pdf"])

        assert "undefinedfilename" in str(exc_info.value)

    def test_launch_failure_raises_merge_error(self, tmp_path):
        merger = GhostscriptMerger("test", command="no-such-gs", runner=MissingExecutableRunner())

        with pytest.raises(MergeError) as exc_info:
            merger([tmp_path / "a.pdf", tmp_path / "b.pdf"])

        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_empty_input_rejected(self):
        with pytest.raises(ValueError):
            GhostscriptMerger("test", runner=FakeRunner())([])


@pytest.mark.unit
class TestRunProcess:
    """Tests for the subprocess-backed process runner."""

    def test_captures_exit_status_and_output(self, tmp_path):
        script = "import os, sys; print(os.getcwd()); print('oops', file=sys.stderr); sys.exit(3)"

        result = run_process([sys.executable, "-c", script], cwd=tmp_path)

        assert result.returncode == 3
        assert not result.success
        assert Path(result.stdout.strip()) == tmp_path.resolve()
        assert result.stderr.strip() == "oops"

    def test_missing_executable_raises_oserror(self):
        with pytest.raises(OSError):
            run_process(["courier-definitely-not-installed"])
