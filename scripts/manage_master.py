#!/usr/bin/env python3
"""
Command-line interface for viewing and curating the master resume.

Commands:
    show             - Print an overview of the master resume
    export           - Write the master resume JSON (stdout or file)
    reset            - Discard the master resume and start over
    add-skill        - Add a skill to a skill group
    suggest-skills   - Ask the LLM for related skills (optionally add them)
    generate-summary - Generate a professional summary with the LLM
    enhance-bullets  - Rewrite the bullets of one experience entry with the LLM
"""

from pathlib import Path
from typing import Optional

import typer

from resumecrafter.contexts.curation import JsonFileStorage, ResumeStore
from resumecrafter.contexts.curation.logger import setup_curation_logger
from resumecrafter.contexts.curation.resume_schema import SKILL_GROUPS, create_skill_entry
from resumecrafter.contexts.intake import enhance_all_bullets, generate_summary, suggest_skills
from resumecrafter.utils.llm import CompletionClient, ConfigurationError, SessionConfig
from resumecrafter.utils.timestamp import format_timestamp

app = typer.Typer(
    add_completion=False,
    help="View and curate the master resume",
    invoke_without_command=True,
)

MASTER_DIR_OPTION = typer.Option(
    None, "--master-dir", help="Master resume directory (default: MASTER_RESUME_DIR)"
)
PROVIDER_OPTION = typer.Option(None, "--provider", help="LLM provider: openai or anthropic")
MODEL_OPTION = typer.Option(None, "--model", help="Model name (default: provider default)")


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _open_store(master_dir: Optional[Path]) -> ResumeStore:
    return ResumeStore(JsonFileStorage(master_dir))


def _client(provider: Optional[str], model: Optional[str]) -> CompletionClient:
    client = CompletionClient(SessionConfig.from_env(provider=provider, model=model))
    if not client.is_configured():
        typer.secho(
            "✗ No API configuration. Set OPENAI_API_KEY or ANTHROPIC_API_KEY (see .env.example).",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    return client


def _check_group(group: str) -> None:
    if group not in SKILL_GROUPS:
        typer.secho(
            f"✗ Unknown skill group: {group}. Use one of {', '.join(SKILL_GROUPS)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


# =============================================================================
# VIEWING
# =============================================================================


@app.command("show")
def show_command(master_dir: Optional[Path] = MASTER_DIR_OPTION):
    """Print an overview of the master resume."""
    resume = _open_store(master_dir).get_resume()

    typer.secho(f"\n{resume.meta.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Updated {format_timestamp(resume.meta.updated_at, relative=True)}")

    contact = resume.contact
    typer.echo(f"\n  Name:     {contact.full_name or '(empty)'}")
    typer.echo(f"  Email:    {contact.email or '(empty)'}")
    typer.echo(f"  Location: {contact.location or '(empty)'}")

    typer.echo("\nExperience:")
    if not resume.experience:
        typer.echo("  (none)")
    for entry in resume.experience:
        end = "Present" if entry.current else entry.end_date
        typer.echo(f"  [{entry.id[:8]}] {entry.title} at {entry.company} ({entry.start_date} - {end})")
        typer.echo(f"             {len(entry.bullets)} bullet(s)")

    typer.echo("\nEducation:")
    if not resume.education:
        typer.echo("  (none)")
    for entry in resume.education:
        typer.echo(f"  {entry.degree or '(degree)'}, {entry.institution}")

    typer.echo("\nSkills:")
    for group in SKILL_GROUPS:
        names = [s.name for s in resume.skills.group(group)]
        typer.echo(f"  {group}: {', '.join(names) if names else '(none)'}")

    typer.echo(
        f"\nCertifications: {len(resume.certifications)}, Projects: {len(resume.projects)}, "
        f"Awards: {len(resume.awards)}, Publications: {len(resume.publications)}"
    )


@app.command("export")
def export_command(
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output JSON file (default: stdout)"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
):
    """
    Export the master resume as JSON.

    Examples:\n

        $ manage_master.py export -o master_resume.json
    """
    text = _open_store(master_dir).export_json()
    if output is None:
        typer.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.secho(f"✓ Exported to {output}", fg=typer.colors.GREEN)


# =============================================================================
# CURATION
# =============================================================================


@app.command("reset")
def reset_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
):
    """Discard the master resume and start over from an empty one."""
    if not yes:
        typer.confirm("Discard the whole master resume?", abort=True)

    setup_curation_logger(operation="reset")
    _open_store(master_dir).reset()
    typer.secho("✓ Master resume reset", fg=typer.colors.GREEN)


@app.command("add-skill")
def add_skill_command(
    name: str = typer.Argument(..., help="Skill name"),
    group: str = typer.Option("technical", "--group", "-g", help="technical, soft or languages"),
    proficiency: str = typer.Option("intermediate", "--proficiency", "-p", help="Proficiency level"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
):
    """Add one skill unless the group already lists it (case-insensitive)."""
    _check_group(group)
    setup_curation_logger(operation="add-skill")

    store = _open_store(master_dir)
    if store.add_skill(group, create_skill_entry(name.strip(), proficiency=proficiency)):
        typer.secho(f"✓ Added {name} to {group}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"⊘ {name} already in {group} (or empty)", fg=typer.colors.YELLOW)


@app.command("suggest-skills")
def suggest_skills_command(
    group: str = typer.Option("technical", "--group", "-g", help="Skill group to draw from and add to"),
    add: bool = typer.Option(False, "--add", help="Add every suggestion to the group"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
    provider: Optional[str] = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
):
    """Ask the LLM for skills related to the ones already listed."""
    _check_group(group)
    setup_curation_logger(operation="suggest-skills")

    store = _open_store(master_dir)
    suggestions = suggest_skills(_client(provider, model), store.get_resume().skills.group(group))

    if not suggestions:
        typer.secho("No suggestions", fg=typer.colors.YELLOW)
        return

    typer.secho(f"Suggested skills ({len(suggestions)}):", fg=typer.colors.BLUE, bold=True)
    for name in suggestions:
        typer.echo(f"  • {name}")

    if add:
        added = sum(store.add_skill(group, name) for name in suggestions)
        typer.secho(f"✓ Added {added} skill(s) to {group}", fg=typer.colors.GREEN)


@app.command("generate-summary")
def generate_summary_command(
    save: bool = typer.Option(False, "--save", help="Make the summary current (kept as a variant)"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
    provider: Optional[str] = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
):
    """Generate a professional summary from experience and skills."""
    setup_curation_logger(operation="generate-summary")

    store = _open_store(master_dir)
    resume = store.get_resume()
    summary = generate_summary(_client(provider, model), resume.experience, resume.skills)

    typer.echo(f"\n{summary}\n")
    if save:
        store.adopt_summary_variant(summary)
        typer.secho("✓ Summary saved", fg=typer.colors.GREEN)


@app.command("enhance-bullets")
def enhance_bullets_command(
    experience_id: str = typer.Argument(..., help="Experience entry id (or a unique prefix, as shown by 'show')"),
    master_dir: Optional[Path] = MASTER_DIR_OPTION,
    provider: Optional[str] = PROVIDER_OPTION,
    model: Optional[str] = MODEL_OPTION,
):
    """
    Rewrite every bullet of one experience entry, one at a time.

    Each rewrite is saved as soon as it arrives; bullets whose rewrite fails
    are left unchanged.
    """
    setup_curation_logger(operation="enhance-bullets")

    store = _open_store(master_dir)
    matches = [e for e in store.get_resume().experience if e.id.startswith(experience_id)]
    if len(matches) != 1:
        problem = "No" if not matches else "More than one"
        typer.secho(f"✗ {problem} experience entry matches '{experience_id}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    entry = matches[0]

    def on_update(index, bullet):
        store.update_experience(entry.id, bullets=entry.bullets)
        typer.echo(f"  {index + 1}. {bullet.text}")

    try:
        result = enhance_all_bullets(_client(provider, model), entry.bullets, on_update=on_update)
    except ConfigurationError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"✓ Enhanced {len(result.updated)} of {len(entry.bullets)} bullet(s)", fg=typer.colors.GREEN
    )
    if result.failed:
        typer.secho(f"  {len(result.failed)} bullet(s) left unchanged", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    app()
