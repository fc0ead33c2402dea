"""
VITAE - Versioned, Interactive Templates for Authoring Employment histories

An observable resume document store with debounced persistence and
template-based rendering.

Architecture:
- Editing Context: Resume document model, invariants, and mutation operations
- Persistence Context: Key-value backends, load/repair, debounced writes
- Rendering Context: HTML and markdown presentation of a document snapshot
- Enhancement Context: Rule-based text improvement for resume fields
- Identity Context: Entitlement flags used to gate optional features
"""

__version__ = "0.1.0"
