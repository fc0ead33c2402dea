"""Unit tests for rule-based enhancement and the improve_field workflow."""

import asyncio
import random

import pytest

from vitae.contexts.editing import IndexOutOfRangeError, InvalidFieldError
from vitae.contexts.enhancement import (
    ContentFeedback,
    EnhancementError,
    enhance,
    get_content_feedback,
    improve_field,
)
from vitae.contexts.enhancement.enhancer import (
    ACTION_VERBS,
    DESCRIPTION_SUFFIX,
    EXTRA_HIGHLIGHT,
    SUMMARY_SUFFIX,
    enhance_description,
    enhance_highlights,
    enhance_summary,
)
from vitae.contexts.identity import EntitlementError, Entitlements

PREMIUM = Entitlements(signed_in_user="user@example.com", is_premium=True)


def _run(coroutine):
    return asyncio.run(coroutine)


# Rules


@pytest.mark.unit
def test_short_summary_gets_suffix():
    """Test that short summaries are extended rather than rewritten."""
    assert enhance_summary("Good engineer.") == "Good engineer." + SUMMARY_SUFFIX


@pytest.mark.unit
def test_long_summary_rewords():
    """Test word replacements on a long summary."""
    text = "experienced developer who worked on payment systems and helped good teams ship " * 2

    result = enhance_summary(text)

    assert "accomplished developer" in result
    assert "spearheaded payment systems" in result
    assert "led exceptional teams" in result
    assert "experienced" not in result


@pytest.mark.unit
def test_description_rules_match_whole_words():
    """Test that replacements do not touch words that merely contain a rule word."""
    text = "Responsible for the platform; Madeline made the dashboards and improved latency."

    result = enhance_description(text)

    assert result.startswith("led the platform")
    assert "Madeline created the dashboards" in result
    assert "optimized latency" in result


@pytest.mark.unit
def test_short_description_gets_suffix():
    """Test the suffix for short descriptions."""
    assert enhance_description("Built APIs.") == "Built APIs." + DESCRIPTION_SUFFIX


@pytest.mark.unit
def test_enhance_highlights():
    """Test verb prefixing, metric sharpening, and padding of short lists."""
    text = "Led a team that improved uptime by 10%\n\nbuilt internal dashboards"

    lines = enhance_highlights(text, rng=random.Random(7)).split("\n")

    assert lines[0] == "Led a team that increased uptime by 35%"
    verb, rest = lines[1].split(" ", 1)
    assert verb in ACTION_VERBS
    assert rest == "built internal dashboards"
    assert lines[2] == EXTRA_HIGHLIGHT
    assert len(lines) == 3


@pytest.mark.unit
def test_enhance_highlights_is_deterministic_with_seed():
    """Test that a seeded random source gives repeatable output."""
    text = "wrote docs\nfixed bugs\nran standups"

    first = enhance_highlights(text, rng=random.Random(1))
    second = enhance_highlights(text, rng=random.Random(1))

    assert first == second
    assert EXTRA_HIGHLIGHT not in first


@pytest.mark.unit
def test_enhance_dispatch():
    """Test the async entry point for each field kind."""
    assert _run(enhance("Short.", "summary")) == "Short." + SUMMARY_SUFFIX
    assert _run(enhance("Short.", "description")) == "Short." + DESCRIPTION_SUFFIX
    assert _run(enhance("Acme Corp", "company")) == "Acme Corp"
    assert _run(enhance("   ", "summary")) == "   "


@pytest.mark.unit
@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5])
def test_content_feedback(seed):
    """Test that feedback scores stay in range and match their verdicts."""
    feedback = _run(get_content_feedback("experience", "Did things", rng=random.Random(seed)))

    assert isinstance(feedback, ContentFeedback)
    assert 60 <= feedback.score <= 99
    if feedback.score < 70:
        assert "significant improvement" in feedback.feedback
    elif feedback.score < 85:
        assert feedback.feedback.startswith("Good content")
    else:
        assert feedback.feedback.startswith("Excellent content")


# Workflow


async def _shout(text, field_kind):
    return text.upper()


@pytest.mark.unit
def test_improve_personal_summary(store):
    """Test enhancing a personal field."""
    original = store.snapshot.personal.summary

    document = _run(improve_field(store, PREMIUM, "personal", "summary", enhancer=_shout))

    assert document.personal.summary == original.upper()
    assert store.snapshot is document


@pytest.mark.unit
def test_improve_highlights_round_trips_lines(store):
    """Test that highlights are passed as text and split on write."""
    received = []

    async def enhancer(text, field_kind):
        received.append((text, field_kind))
        return "First\n\nSecond"

    _run(improve_field(store, PREMIUM, "experience", "highlights", index=1, enhancer=enhancer))

    text, field_kind = received[0]
    assert field_kind == "highlights"
    assert text.startswith("Developed responsive web applications")
    assert store.snapshot.experience_entries[1].highlights == ("First", "Second")


@pytest.mark.unit
def test_improve_custom_section_content(store):
    """Test enhancing custom section content."""
    store.add_custom_section("Awards")
    store.update_custom_section(0, "content", "best paper")

    _run(improve_field(store, PREMIUM, "custom", "content", index=0, enhancer=_shout))

    assert store.snapshot.custom_sections[0].content == "BEST PAPER"


@pytest.mark.unit
def test_improve_follows_entry_moved_during_enhancement(store):
    """Test that the result lands on the same entry after an earlier one is removed."""

    async def enhancer(text, field_kind):
        store.remove_experience_entry(0)
        return "Rewritten"

    _run(improve_field(store, PREMIUM, "experience", "description", index=1, enhancer=enhancer))

    entries = store.snapshot.experience_entries
    assert len(entries) == 1
    assert entries[0].id == "2"
    assert entries[0].description == "Rewritten"


@pytest.mark.unit
def test_improve_fails_when_entry_removed_during_enhancement(store):
    """Test EnhancementError when the target entry disappears."""

    async def enhancer(text, field_kind):
        store.remove_experience_entry(0)
        return "Rewritten"

    with pytest.raises(EnhancementError):
        _run(improve_field(store, PREMIUM, "experience", "description", index=0, enhancer=enhancer))

    assert all(e.description != "Rewritten" for e in store.snapshot.experience_entries)


@pytest.mark.unit
def test_improve_wraps_enhancer_failure(store):
    """Test that enhancer errors surface as EnhancementError and leave the document alone."""
    before = store.snapshot

    async def enhancer(text, field_kind):
        raise ConnectionError("service unavailable")

    with pytest.raises(EnhancementError) as exc_info:
        _run(improve_field(store, PREMIUM, "personal", "summary", enhancer=enhancer))

    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert store.snapshot is before


@pytest.mark.unit
@pytest.mark.parametrize(
    "entitlements",
    [Entitlements.anonymous(), Entitlements(signed_in_user="free@example.com")],
)
def test_improve_requires_entitlement(store, entitlements):
    """Test that the enhancer is never called without entitlement."""
    called = []

    async def enhancer(text, field_kind):
        called.append(text)
        return text

    with pytest.raises(EntitlementError):
        _run(improve_field(store, entitlements, "personal", "summary", enhancer=enhancer))

    assert called == []


@pytest.mark.unit
def test_improve_rejects_bad_targets(store):
    """Test validation of section, field, and index."""
    with pytest.raises(ValueError):
        _run(improve_field(store, PREMIUM, "hobbies", "summary", enhancer=_shout))
    with pytest.raises(InvalidFieldError):
        _run(improve_field(store, PREMIUM, "experience", "salary", index=0, enhancer=_shout))
    with pytest.raises(IndexOutOfRangeError):
        _run(improve_field(store, PREMIUM, "education", "degree", index=5, enhancer=_shout))
    with pytest.raises(IndexOutOfRangeError):
        _run(improve_field(store, PREMIUM, "experience", "description", enhancer=_shout))
