"""
Default values for a VITAE editing session.

Provides the seed document used when no saved resume exists (or the saved one
cannot be read). The seed lives in sample_resume.yaml next to this module so it
can be edited without touching code.
"""

from functools import lru_cache
from pathlib import Path

from omegaconf import OmegaConf

from vitae.contexts.editing.document_data_structure import ResumeDocument
from vitae.contexts.editing.repair import repair

SAMPLE_RESUME_PATH = Path(__file__).parent / "sample_resume.yaml"


@lru_cache(maxsize=None)
def _load_default_document(sample_path: Path) -> ResumeDocument:
    sample = OmegaConf.to_container(OmegaConf.load(sample_path), resolve=True)
    return repair(sample)


def get_default_document(sample_path: Path = SAMPLE_RESUME_PATH) -> ResumeDocument:
    """
    Get the built-in sample resume.

    The document is immutable, so the same instance is shared by every caller.

    Args:
        sample_path: Optional path to an alternative seed YAML file

    Returns:
        ResumeDocument built from the seed file
    """
    return _load_default_document(sample_path)


def get_empty_document() -> ResumeDocument:
    """Get a document with every field empty and the default template."""
    return ResumeDocument()
