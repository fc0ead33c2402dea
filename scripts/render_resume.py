#!/usr/bin/env python3
"""
Resume Rendering CLI

Renders the stored resume with its selected template.

Commands:
    html     - Print the rendered HTML page
    markdown - Print the resume as markdown
    export   - Write a print-ready HTML file

Examples:\n

    render_resume.py html > preview.html

    render_resume.py markdown

    render_resume.py export outs/                          # outs/John_Doe_resume.html

    render_resume.py export resume.html --template classic # Export with another template
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from vitae.contexts.editing import InvalidTemplateError, ResumeDocument, ResumeStore
from vitae.contexts.editing.document_data_structure import TemplateId, coerce_template
from vitae.contexts.persistence import DocumentPersistence
from vitae.contexts.rendering import TemplateRenderError, export_resume, render_html, render_markdown
from vitae.contexts.rendering.logger import setup_rendering_logger
from vitae.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Render the stored resume to HTML or markdown",
    add_completion=False,
    invoke_without_command=True,
)

StorageOption = Annotated[
    Optional[Path],
    typer.Option("--storage", "-s", help="Storage directory (default: VITAE_STORAGE_PATH)"),
]
TemplateOption = Annotated[
    Optional[str],
    typer.Option("--template", "-t", help="Render with this template instead of the selected one"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_document(storage: Optional[Path], template: Optional[str] = None) -> ResumeDocument:
    """Load the stored document, optionally previewing it with another template."""
    store = ResumeStore(DocumentPersistence.from_directory(storage))
    document = store.snapshot
    store.close()

    if template is None:
        return document

    try:
        template_id = coerce_template(template)
    except (ValueError, TypeError):
        error = InvalidTemplateError(template, [t.value for t in TemplateId])
        typer.secho(f"✗ {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    # Preview only; the stored selection is left alone
    return replace(document, template_id=template_id)


@app.command("html")
def html_command(storage: StorageOption = None, template: TemplateOption = None):
    """Print the rendered HTML page to stdout."""
    document = load_document(storage, template)
    try:
        typer.echo(render_html(document))
    except TemplateRenderError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("markdown")
def markdown_command(storage: StorageOption = None):
    """Print the resume as markdown."""
    typer.echo(render_markdown(load_document(storage)))


@app.command("export")
def export_command(
    output: Annotated[
        Path,
        typer.Argument(help="Output file, or a directory for <Name>_resume.html"),
    ],
    storage: StorageOption = None,
    template: TemplateOption = None,
    no_overwrite: Annotated[
        bool,
        typer.Option("--no-overwrite", help="Refuse to replace an existing file"),
    ] = False,
    log: Annotated[
        bool,
        typer.Option("--log", help="Write a detailed session log under LOGS_PATH"),
    ] = False,
):
    """
    Export a print-ready HTML file.

    Open the file in a browser and print (or "Save as PDF") to get the final document.

    Examples:\n

        $ render_resume.py export outs/

        $ render_resume.py export resume.html --template executive --no-overwrite
    """
    if log:
        setup_rendering_logger(LOGS_PATH / f"render_{now()}")

    document = load_document(storage, template)
    result = export_resume(document, output, overwrite_allowed=not no_overwrite)

    if not result.success:
        typer.secho(f"✗ Export failed: {result.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"✓ Exported {result.template_id} resume to {result.output_path} ({result.size_bytes:,} bytes)",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
