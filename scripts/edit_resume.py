#!/usr/bin/env python3
"""
Command-line interface for editing the stored resume document.

Each command opens the resume stored under VITAE_STORAGE_PATH (the sample
resume when nothing is stored yet), applies one edit, and writes the result
before exiting.

Commands:
    show              - Print the current document
    set-personal      - Set a personal field (name, title, email, ...)
    add-experience    - Append an empty experience entry
    update-experience - Set a field of an experience entry
    remove-experience - Remove an experience entry
    add-education     - Append an empty education entry
    update-education  - Set a field of an education entry
    remove-education  - Remove an education entry
    add-skill         - Append a skill
    remove-skill      - Remove a skill by position
    add-section       - Append a custom section
    update-section    - Set the title or content of a custom section
    remove-section    - Remove a custom section
    template          - Select the presentation template
    history           - Show recent saves and load failures
    templates         - List available templates
    enhance           - Improve a field's text (premium)

Examples:\n

    edit_resume.py show

    edit_resume.py set-personal name "Jane Roe"

    edit_resume.py update-experience 0 highlights $'Led migration\\nCut costs by 20%'

    edit_resume.py template tech
"""

import asyncio
import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from vitae.contexts.editing import (
    IndexOutOfRangeError,
    InvalidFieldError,
    InvalidTemplateError,
    ResumeStore,
)
from vitae.contexts.editing.logger import setup_editing_logger
from vitae.contexts.enhancement import EnhancementError, improve_field
from vitae.contexts.identity import EntitlementError, Entitlements
from vitae.contexts.persistence import DocumentPersistence
from vitae.contexts.rendering import get_default_registry
from vitae.utils.event_logging import EVENTS_FILE, get_recent_events
from vitae.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

EDIT_ERRORS = (InvalidFieldError, IndexOutOfRangeError, InvalidTemplateError)

app = typer.Typer(
    add_completion=False,
    help="Edit the stored resume document",
    invoke_without_command=True,
)

StorageOption = Annotated[
    Optional[Path],
    typer.Option("--storage", "-s", help="Storage directory (default: VITAE_STORAGE_PATH)"),
]
LogOption = Annotated[
    bool,
    typer.Option("--log", help="Write a detailed session log under LOGS_PATH"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@contextmanager
def open_store(storage: Optional[Path], log: bool = False) -> Iterator[ResumeStore]:
    """
    Open the stored document, yield the store, and write pending changes on exit.

    Edit errors are printed in red and end the command with exit code 1.
    """
    if log:
        log_file = setup_editing_logger(LOGS_PATH / f"edit_{now()}")
        typer.echo(f"Logging to {log_file}")

    store = ResumeStore(DocumentPersistence.from_directory(storage))
    try:
        yield store
    except EDIT_ERRORS as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        store.close(flush=True)


def _done(message: str) -> None:
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)


@app.command("show")
def show_command(
    storage: StorageOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the stored JSON layout")] = False,
):
    """Print the current document."""
    with open_store(storage) as store:
        if as_json:
            typer.echo(json.dumps(store.to_dict(), indent=2, ensure_ascii=False))
            return

        document = store.snapshot
        personal = document.personal
        typer.secho(f"\n{personal.name or '(no name)'}", fg=typer.colors.BLUE, bold=True)
        if personal.title:
            typer.echo(personal.title)
        typer.echo(f"Template: {document.template_id.value}\n")

        typer.secho("Experience", bold=True)
        for i, entry in enumerate(document.experience_entries):
            typer.echo(f"  [{i}] {entry.position} @ {entry.company} ({entry.start_date} - {entry.end_date})")
            for highlight in entry.highlights:
                typer.echo(f"        • {highlight}")

        typer.secho("Education", bold=True)
        for i, entry in enumerate(document.education_entries):
            typer.echo(f"  [{i}] {entry.degree} in {entry.field}, {entry.institution}")

        typer.secho("Skills", bold=True)
        for i, skill in enumerate(document.skills):
            typer.echo(f"  [{i}] {skill}")

        if document.custom_sections:
            typer.secho("Custom sections", bold=True)
            for i, section in enumerate(document.custom_sections):
                typer.echo(f"  [{i}] {section.title}")


@app.command("set-personal")
def set_personal_command(
    field: Annotated[str, typer.Argument(help="Field name (e.g., name, email, linkedin)")],
    value: Annotated[str, typer.Argument(help="New value (empty string clears the field)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Set a personal field."""
    with open_store(storage, log) as store:
        store.update_personal_field(field, value)
        _done(f"personal.{field} updated")


@app.command("add-experience")
def add_experience_command(storage: StorageOption = None, log: LogOption = False):
    """Append an empty experience entry."""
    with open_store(storage, log) as store:
        entry_id = store.add_experience_entry()
        _done(f"Added experience entry {entry_id} at position {len(store.snapshot.experience_entries) - 1}")


@app.command("update-experience")
def update_experience_command(
    index: Annotated[int, typer.Argument(help="Entry position (0-based)")],
    field: Annotated[str, typer.Argument(help="company, position, start_date, end_date, description or highlights")],
    value: Annotated[str, typer.Argument(help="New value; highlights are newline-separated")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """
    Set a field of an experience entry.

    Examples:\n

        $ edit_resume.py update-experience 0 end_date Present

        $ edit_resume.py update-experience 1 highlights $'Shipped v2\\nMentored 3 engineers'
    """
    with open_store(storage, log) as store:
        store.update_experience_entry(index, field, value)
        _done(f"experience[{index}].{field} updated")


@app.command("remove-experience")
def remove_experience_command(
    index: Annotated[int, typer.Argument(help="Entry position (0-based)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Remove an experience entry; later entries shift down."""
    with open_store(storage, log) as store:
        store.remove_experience_entry(index)
        _done(f"Removed experience entry {index}")


@app.command("add-education")
def add_education_command(storage: StorageOption = None, log: LogOption = False):
    """Append an empty education entry."""
    with open_store(storage, log) as store:
        entry_id = store.add_education_entry()
        _done(f"Added education entry {entry_id} at position {len(store.snapshot.education_entries) - 1}")


@app.command("update-education")
def update_education_command(
    index: Annotated[int, typer.Argument(help="Entry position (0-based)")],
    field: Annotated[str, typer.Argument(help="institution, degree, field, start_date, end_date or gpa")],
    value: Annotated[str, typer.Argument(help="New value")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Set a field of an education entry."""
    with open_store(storage, log) as store:
        store.update_education_entry(index, field, value)
        _done(f"education[{index}].{field} updated")


@app.command("remove-education")
def remove_education_command(
    index: Annotated[int, typer.Argument(help="Entry position (0-based)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Remove an education entry."""
    with open_store(storage, log) as store:
        store.remove_education_entry(index)
        _done(f"Removed education entry {index}")


@app.command("add-skill")
def add_skill_command(
    skill: Annotated[str, typer.Argument(help="Skill text (trimmed; duplicates are ignored)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Append a skill."""
    with open_store(storage, log) as store:
        before = store.snapshot
        if store.add_skill(skill) is before:
            typer.secho(f"⊘ '{skill.strip()}' not added (blank or already listed)", fg=typer.colors.YELLOW)
        else:
            _done(f"Added skill '{skill.strip()}'")


@app.command("remove-skill")
def remove_skill_command(
    index: Annotated[int, typer.Argument(help="Skill position (0-based)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Remove a skill by position."""
    with open_store(storage, log) as store:
        skill = store.snapshot.skills[index] if 0 <= index < len(store.snapshot.skills) else None
        store.remove_skill(index)
        _done(f"Removed skill '{skill}'")


@app.command("add-section")
def add_section_command(
    title: Annotated[str, typer.Argument(help="Section title (e.g., Certifications)")],
    content: Annotated[Optional[str], typer.Option("--content", "-c", help="Initial content")] = None,
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Append a custom section."""
    with open_store(storage, log) as store:
        section_id = store.add_custom_section(title)
        position = len(store.snapshot.custom_sections) - 1
        if content is not None:
            store.update_custom_section(position, "content", content)
        _done(f"Added section '{title}' ({section_id}) at position {position}")


@app.command("update-section")
def update_section_command(
    index: Annotated[int, typer.Argument(help="Section position (0-based)")],
    field: Annotated[str, typer.Argument(help="title or content")],
    value: Annotated[str, typer.Argument(help="New value")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Set the title or content of a custom section."""
    with open_store(storage, log) as store:
        store.update_custom_section(index, field, value)
        _done(f"custom_sections[{index}].{field} updated")


@app.command("remove-section")
def remove_section_command(
    index: Annotated[int, typer.Argument(help="Section position (0-based)")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Remove a custom section."""
    with open_store(storage, log) as store:
        store.remove_custom_section(index)
        _done(f"Removed section {index}")


@app.command("template")
def template_command(
    template_id: Annotated[str, typer.Argument(help="modern, classic, minimal, creative, executive or tech")],
    storage: StorageOption = None,
    log: LogOption = False,
):
    """Select the presentation template."""
    with open_store(storage, log) as store:
        store.change_template(template_id)
        _done(f"Template set to {template_id}")


@app.command("templates")
def templates_command():
    """List available templates."""
    typer.secho("\nAvailable templates:", fg=typer.colors.BLUE, bold=True)
    for entry in get_default_registry().available_templates():
        typer.echo(f"  {entry['id']:<10} {entry['name']}: {entry['description']}")


@app.command("history")
def history_command(
    n: Annotated[int, typer.Option("--num", "-n", help="Number of events to show")] = 10,
    event_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Only show this event type (e.g., document_saved)"),
    ] = None,
    relative: Annotated[
        bool,
        typer.Option("--relative", "-r", help="Show relative timestamps (e.g., '2h ago')"),
    ] = False,
):
    """
    Show recent saves and load failures from the document event log.

    Requires VITAE_EVENTS_FILE to be set.

    Examples:\n

        $ edit_resume.py history -n 5 --relative

        $ edit_resume.py history --type document_load_failed
    """
    if EVENTS_FILE is None:
        typer.secho("Event logging is disabled (VITAE_EVENTS_FILE is not set)", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    events = get_recent_events(n=n, event_type=event_type)
    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nShowing last {len(events)} event(s):\n", fg=typer.colors.BLUE)
    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=relative)
        color = typer.colors.RED if event["event_type"].endswith("failed") else typer.colors.GREEN
        typer.secho(f"{when}  {event['event_type']}", fg=color, nl=False)
        details = {k: v for k, v in event.items() if k not in ("timestamp", "event_type", "source")}
        typer.echo(f"  {json.dumps(details)}" if details else "")


@app.command("enhance")
def enhance_command(
    section: Annotated[str, typer.Argument(help="personal, experience, education or custom")],
    field: Annotated[str, typer.Argument(help="Field to improve (e.g., summary, description, highlights)")],
    index: Annotated[Optional[int], typer.Option("--index", "-i", help="Entry position (not used for personal)")] = None,
    premium: Annotated[
        bool,
        typer.Option("--premium", help="Act as a signed-in premium user (no identity service here)"),
    ] = False,
    storage: StorageOption = None,
    log: LogOption = False,
):
    """
    Improve a field's text and save the result.

    Examples:\n

        $ edit_resume.py enhance personal summary --premium

        $ edit_resume.py enhance experience highlights --index 0 --premium
    """
    if premium:
        entitlements = Entitlements(signed_in_user="cli", is_premium=True)
    else:
        entitlements = Entitlements.anonymous()

    with open_store(storage, log) as store:
        try:
            asyncio.run(improve_field(store, entitlements, section, field, index=index))
        except (EntitlementError, EnhancementError, ValueError) as e:
            typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        _done(f"{section}.{field} enhanced")


if __name__ == "__main__":
    app()
