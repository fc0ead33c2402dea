"""
Resume Export Module

Writes a print-ready HTML file for a document. The page carries print CSS, so
opening it in a browser and printing (or "Save as PDF") produces the final
document; no PDF is generated here.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from vitae.contexts.editing.document_data_structure import ResumeDocument
from vitae.contexts.rendering.exceptions import TemplateRenderError
from vitae.contexts.rendering.logger import log_export_result, log_export_start
from vitae.contexts.rendering.renderer import render_html
from vitae.contexts.rendering.template_registry import TemplateRegistry


@dataclass
class ExportResult:
    """
    Result of a resume export.

    Attributes:
        success: Whether the file was written
        template_id: Template used for rendering
        output_path: Path to the written file (None if failed)
        size_bytes: Size of the written file
        error: Error description (None on success)
    """

    success: bool
    template_id: str
    output_path: Optional[Path] = None
    size_bytes: int = 0
    error: Optional[str] = None


def default_export_filename(document: ResumeDocument) -> str:
    """File name derived from the person's name, e.g. "John_Doe_resume.html"."""
    stem = "_".join(document.personal.name.split()) or "resume"
    if stem != "resume":
        stem = f"{stem}_resume"
    return f"{stem}.html"


def export_resume(
    document: ResumeDocument,
    output_path: Union[str, Path],
    registry: Optional[TemplateRegistry] = None,
    overwrite_allowed: bool = True,
) -> ExportResult:
    """
    Render a document and write it as a print-ready HTML file.

    Args:
        document: Snapshot to export
        output_path: Destination file, or a directory to place the default file name in
        registry: Template registry (defaults to the packaged templates)
        overwrite_allowed: Whether an existing file may be replaced

    Returns:
        ExportResult describing the outcome; failures are reported, not raised
    """
    output_path = Path(output_path)
    if output_path.is_dir():
        output_path = output_path / default_export_filename(document)

    template_id = document.template_id.value
    log_export_start(template_id, output_path)
    start_time = time.time()

    if output_path.exists() and not overwrite_allowed:
        result = ExportResult(
            success=False,
            template_id=template_id,
            error=f"{output_path} already exists and overwriting is disabled",
        )
        log_export_result(result, time.time() - start_time)
        return result

    try:
        html = render_html(document, registry=registry)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
    except (TemplateRenderError, OSError) as e:
        result = ExportResult(success=False, template_id=template_id, error=str(e))
    else:
        result = ExportResult(
            success=True,
            template_id=template_id,
            output_path=output_path,
            size_bytes=output_path.stat().st_size,
        )

    log_export_result(result, time.time() - start_time)
    return result
