#!/usr/bin/env python3
"""
Tailor the master resume to a job description.

Writes a reduced, single-page resume as JSON (same field names as the master
resume export).

Usage:
    python scripts/craft_resume.py data/jobs/MLEng_Acme.md
    python scripts/craft_resume.py job.txt -o outs/tailored/acme.json
    python scripts/craft_resume.py job.txt --master master_resume.json --provider anthropic
    python scripts/craft_resume.py --url https://example.com/jobs/123 -o outs/tailored/example.json
"""

import json
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumecrafter.contexts.curation import (
    JsonFileStorage,
    RecordShapeError,
    ResumeStore,
    record_from_dict,
)
from resumecrafter.contexts.targeting import (
    JobFetchError,
    TailoringError,
    craft_tailored_resume,
    fetch_job_description,
)
from resumecrafter.contexts.targeting.logger import setup_targeting_logger
from resumecrafter.utils.llm import CompletionClient, ConfigurationError, SessionConfig

load_dotenv()

TAILORED_OUTPUT_PATH = Path(os.getenv("TAILORED_OUTPUT_PATH", "outs/tailored"))

app = typer.Typer(add_completion=False, help="Tailor the master resume to a job description.")


def _load_master(master: Optional[Path], master_dir: Optional[Path]):
    if master is None:
        return ResumeStore(JsonFileStorage(master_dir)).get_resume()

    if not master.exists():
        typer.secho(f"✗ Master resume not found: {master}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        return record_from_dict(json.loads(master.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, RecordShapeError) as e:
        typer.secho(f"✗ Invalid master resume {master}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _url_stem(url: str) -> str:
    parsed = urlparse(url)
    stem = re.sub(r"[^\w.-]+", "_", f"{parsed.netloc}{parsed.path}").strip("_.")
    return stem or "job_posting"


@app.command()
def main(
    job_file: Annotated[
        Optional[Path], typer.Argument(help="Job description text or markdown file")
    ] = None,
    url: Annotated[
        Optional[str], typer.Option("--url", help="Fetch the job description from a posting URL")
    ] = None,
    master: Annotated[
        Optional[Path],
        typer.Option("--master", help="Master resume JSON (default: the stored master resume)"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "-o", "--output", help="Output JSON path (default: TAILORED_OUTPUT_PATH/<job stem>.json)"
        ),
    ] = None,
    master_dir: Annotated[
        Optional[Path],
        typer.Option("--master-dir", help="Master resume directory (default: MASTER_RESUME_DIR)"),
    ] = None,
    provider: Annotated[
        Optional[str], typer.Option("--provider", help="LLM provider: openai or anthropic")
    ] = None,
    model: Annotated[
        Optional[str], typer.Option("--model", help="Model name (default: provider default)")
    ] = None,
):
    """Tailor the master resume to JOB_FILE (or --url) and write the result as JSON."""
    if (job_file is None) == (url is None):
        typer.secho("✗ Give either JOB_FILE or --url", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if job_file is not None and not job_file.exists():
        typer.secho(f"✗ Job description not found: {job_file}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    setup_targeting_logger(job_source=url or str(job_file))

    if url is not None:
        try:
            job_text = fetch_job_description(url)
        except JobFetchError as e:
            typer.secho(f"✗ {e.message}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        stem = _url_stem(url)
    else:
        job_text = job_file.read_text(encoding="utf-8")
        stem = job_file.stem

    resume = _load_master(master, master_dir)
    client = CompletionClient(SessionConfig.from_env(provider=provider, model=model))

    try:
        tailored = craft_tailored_resume(client, resume, job_text)
    except (ConfigurationError, TailoringError, ValueError) as e:
        typer.secho(f"✗ {getattr(e, 'message', e)}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output is None:
        output = TAILORED_OUTPUT_PATH / f"{stem}.json"

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(tailored, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    typer.secho(f"✓ Tailored resume written to {output}", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
