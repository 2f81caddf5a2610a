#!/usr/bin/env python3
"""
Application Package CLI

Builds a personalized application package (cover letter + resume merged into one PDF)
using the packaging context.

Commands:
    name    - Print the package name for a recipient and two sources
    build   - Compile both sources (skipping fresh PDFs) and merge them
    history - Show recent package build events

Examples:\n

    build_package.py name "Jane Doe" letters/acme/letter.tex cv/resume.tex

    build_package.py build "Jane Doe" letters/acme/letter.tex cv/resume.tex

    build_package.py build "Jane Doe" letters/acme/letter.tex cv/resume.tex --verbose

    build_package.py history -n 5
"""

import os
import time
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from courier.contexts.packaging import CompileError, MergeError, Package
from courier.contexts.packaging.logger import setup_packaging_logger
from courier.utils.event_logging import get_recent_events, log_pipeline_event
from courier.utils.pdf_processing import page_count
from courier.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Build personalized application packages from a cover letter and a resume",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


RecipientArg = Annotated[str, typer.Argument(help="Recipient's name (e.g., 'Jane Doe')")]
CoverletterArg = Annotated[
    Path, typer.Argument(help="Path to the cover letter .tex file", exists=True, dir_okay=False)
]
ResumeArg = Annotated[
    Path, typer.Argument(help="Path to the resume .tex file", exists=True, dir_okay=False)
]


@app.command("name")
def name_command(recipient: RecipientArg, coverletter: CoverletterArg, resume: ResumeArg):
    """
    Print the package name (recipient + content fingerprint of both sources).

    Examples:\n

        $ build_package.py name "Jane Doe" letter.tex resume.tex
    """
    package = Package(recipient, coverletter, resume)
    try:
        typer.echo(package.init())
    except OSError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("build")
def build_command(
    recipient: RecipientArg,
    coverletter: CoverletterArg,
    resume: ResumeArg,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output (cache hits, commands)"),
    ] = False,
):
    """
    Compile the cover letter and resume and merge them into one PDF.

    Sources whose PDF is at least as new as the .tex file are not recompiled.
    The merged PDF is written next to the cover letter, named after the recipient.

    Examples:\n

        $ build_package.py build "Jane Doe" letters/acme/letter.tex cv/resume.tex
    """
    log_dir = LOGS_PATH / f"build_{now()}"
    setup_packaging_logger(log_dir, verbose=verbose)

    package = Package(recipient, coverletter, resume)

    typer.secho(f"\nBuilding package for: {recipient}", fg=typer.colors.BLUE, bold=True)
    try:
        package.init()
    except OSError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Name: {package.name}")
    typer.echo("")

    log_pipeline_event(
        event_type="package_build_started",
        package_name=package.name,
        source="cli",
        coverletter=str(coverletter),
        resume=str(resume),
    )
    start_time = time.time()

    try:
        merged = package.make()
    except (CompileError, MergeError, OSError) as e:
        log_pipeline_event(
            event_type="package_build_failed",
            package_name=package.name,
            source="cli",
            stage=package.failed_stage.value,
            error=str(e).splitlines()[0],
        )
        typer.secho(f"\n✗ Build failed while {package.failed_stage.value}", fg=typer.colors.RED, bold=True)
        typer.secho(f"  {e}", fg=typer.colors.RED, err=True)
        typer.echo(f"  Log: {log_dir / 'package.log'}\n")
        raise typer.Exit(code=1)

    pages = page_count(merged)
    log_pipeline_event(
        event_type="package_build_completed",
        package_name=package.name,
        source="cli",
        merged_pdf=str(merged),
        page_count=pages,
        build_time_s=round(time.time() - start_time, 2),
    )

    typer.secho("\n✓ Package built", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  PDF: {merged}")
    typer.echo(f"  Pages: {pages if pages is not None else 'unknown'}")
    typer.echo(f"  Log: {log_dir / 'package.log'}\n")


@app.command("history")
def history_command(
    n: Annotated[int, typer.Option("--num", "-n", help="Number of recent events to show")] = 10,
    package_name: Annotated[
        Optional[str], typer.Option("--package", "-p", help="Filter to events for this package")
    ] = None,
):
    """Show recent package build events."""
    events = get_recent_events(n, package_name=package_name)
    if not events:
        typer.echo("No package events recorded yet.")
        return

    for event in events:
        typer.echo(
            f"{format_timestamp(event['timestamp'])}  {event['event_type']:<24} {event['package_name']}"
        )


if __name__ == "__main__":
    app()
