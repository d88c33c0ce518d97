#!/usr/bin/env python3
"""
Import resume data into the master resume.

Commands:
    linkedin - Parse a LinkedIn "Save to PDF" profile export (no LLM)
    file     - Extract a resume file (PDF/DOCX/TXT) with the configured LLM
    text     - Extract pasted text (file or stdin) with the configured LLM
    json     - Replace the master resume with a previously exported JSON file

Usage:
    python scripts/import_resume.py linkedin ~/Downloads/Profile.pdf
    python scripts/import_resume.py file resume.docx --provider anthropic
    pbpaste | python scripts/import_resume.py text -
    python scripts/import_resume.py json master_resume.json
"""

import sys
from pathlib import Path
from typing import Optional

import typer

from resumecrafter.contexts.curation import (
    ImportFormatError,
    JsonFileStorage,
    MergeReport,
    RecordShapeError,
    ResumeStore,
)
from resumecrafter.contexts.intake import (
    ExtractionParseError,
    UnsupportedFileFormatError,
    extract_text_from_file,
    parse_linkedin_export,
    parse_text_to_resume,
)
from resumecrafter.contexts.intake.logger import setup_intake_logger
from resumecrafter.utils.llm import CompletionClient, ConfigurationError, SessionConfig

app = typer.Typer(
    add_completion=False,
    help="Import resume data into the master resume",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# =============================================================================
# HELPERS
# =============================================================================


def _open_store(master_dir: Optional[Path]) -> ResumeStore:
    return ResumeStore(JsonFileStorage(master_dir))


def _fail(message: str) -> None:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _print_report(report: MergeReport) -> None:
    lines = report.describe()
    if not lines:
        typer.secho("Nothing new to merge", fg=typer.colors.YELLOW)
        return

    typer.secho("✓ Merged into master resume", fg=typer.colors.GREEN, bold=True)
    for line in lines:
        typer.echo(f"  {line}")


def _extract_and_merge(text: str, master_dir: Optional[Path], provider: Optional[str], model: Optional[str]):
    client = CompletionClient(SessionConfig.from_env(provider=provider, model=model))
    try:
        fragment = parse_text_to_resume(client, text)
    except (ConfigurationError, ExtractionParseError, ValueError) as e:
        _fail(str(getattr(e, "message", e)))

    store = _open_store(master_dir)
    _print_report(store.merge(fragment, source="llm"))


# =============================================================================
# COMMANDS
# =============================================================================

MASTER_DIR_OPTION = typer.Option(
    None, "--master-dir", help="Master resume directory (default: MASTER_RESUME_DIR)"
)
PROVIDER_OPTION = typer.Option(None, "--provider", help="LLM provider: openai or anthropic")
MODEL_OPTION = typer.Option(None, "--model", help="Model name (default: provider default)")


@app.command("linkedin")
def linkedin_command(
    profile: Path = typer.Argument(..., help="LinkedIn profile export (PDF, or its text)"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
):
    """
    Import a LinkedIn profile PDF without an LLM.

    Examples:\n

        $ import_resume.py linkedin Profile.pdf
    """
    setup_intake_logger(source=str(profile))

    try:
        fragment = parse_linkedin_export(profile)
    except (FileNotFoundError, UnsupportedFileFormatError) as e:
        _fail(str(e))

    store = _open_store(master_dir)
    _print_report(store.merge(fragment, source="linkedin"))


@app.command("file")
def file_command(
    resume_file: Path = typer.Argument(..., help="Resume file (.pdf, .docx, .txt, .md)"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
    provider: Optional[str] = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
):
    """
    Extract a resume file with the configured LLM and merge it.

    Examples:\n

        $ import_resume.py file resume.pdf

        $ import_resume.py file resume.docx --provider anthropic
    """
    setup_intake_logger(source=str(resume_file))

    try:
        text = extract_text_from_file(resume_file)
    except (FileNotFoundError, UnsupportedFileFormatError) as e:
        _fail(str(e))

    _extract_and_merge(text, master_dir, provider, model)


@app.command("text")
def text_command(
    source: str = typer.Argument("-", help="Text file to read, or '-' for stdin"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
    provider: Optional[str] = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
):
    """
    Extract pasted resume text with the configured LLM and merge it.

    Examples:\n

        $ pbpaste | import_resume.py text

        $ import_resume.py text notes.txt
    """
    setup_intake_logger(source="stdin" if source == "-" else source)

    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            _fail(f"File not found: {path}")
        text = path.read_text(encoding="utf-8")

    _extract_and_merge(text, master_dir, provider, model)


@app.command("json")
def json_command(
    json_file: Path = typer.Argument(..., help="Master resume JSON from 'manage_master.py export'"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
):
    """
    Replace the master resume with an exported JSON document.

    The current master resume is kept if the file is not valid.
    """
    setup_intake_logger(source=str(json_file))

    if not json_file.exists():
        _fail(f"File not found: {json_file}")

    store = _open_store(master_dir)
    try:
        store.import_json(json_file.read_text(encoding="utf-8"))
    except (ImportFormatError, RecordShapeError) as e:
        _fail(str(e))

    resume = store.get_resume()
    typer.secho(f"✓ Imported '{resume.meta.name}'", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Experience: {len(resume.experience)}, Education: {len(resume.education)}")


if __name__ == "__main__":
    app()
