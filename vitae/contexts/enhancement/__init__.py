"""
Enhancement Context

Responsibilities:
- Improves resume text (summary, job description, highlights) with rule-based rewrites
- Scores content and returns short feedback
- Applies an enhancement to a document field through the store's public operations

Owns: Enhancement rules, enhance-and-apply workflow
Never: Mutates the document directly or decides entitlements
"""

from vitae.contexts.enhancement.enhancer import ContentFeedback, enhance, get_content_feedback
from vitae.contexts.enhancement.exceptions import EnhancementError
from vitae.contexts.enhancement.workflow import improve_field

__all__ = [
    "enhance",
    "get_content_feedback",
    "ContentFeedback",
    "improve_field",
    "EnhancementError",
]
