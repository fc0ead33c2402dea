"""
Rule-based text enhancement for resume fields.

Stands in for a remote text-improvement service: the functions are coroutines with
an optional simulated latency so callers are written against the same async
interface a networked service would have.

    improved = await enhance("Worked on the billing system.", "summary")
"""

import asyncio
import os
import random
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from dotenv import load_dotenv

from vitae.contexts.enhancement.logger import _log_debug

load_dotenv()
ENHANCE_DELAY_SECONDS = float(os.getenv("VITAE_ENHANCE_DELAY_SECONDS", "0"))

SUMMARY_MIN_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 50
MIN_HIGHLIGHTS = 3

SUMMARY_SUFFIX = (
    " Skilled in cross-functional collaboration and delivering high-quality solutions"
    " in fast-paced environments."
)
DESCRIPTION_SUFFIX = (
    " Collaborated with cross-functional teams to deliver high-impact solutions that"
    " increased efficiency and user satisfaction."
)
EXTRA_HIGHLIGHT = (
    "Increased team productivity by 25% through implementation of streamlined workflows"
    " and enhanced collaboration tools"
)

ACTION_VERBS = ("Spearheaded", "Orchestrated", "Pioneered", "Transformed", "Revitalized")
_STARTS_WITH_ACTION_VERB = re.compile(r"^(Led|Developed|Created|Managed|Implemented)", re.IGNORECASE)
_PERCENTAGE = re.compile(r"by \d+%", re.IGNORECASE)


def _word_rules(*pairs: Tuple[str, str]) -> List[Tuple[Pattern, str]]:
    return [(re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE), new) for word, new in pairs]


SUMMARY_RULES = _word_rules(
    ("experienced", "accomplished"),
    ("good", "exceptional"),
    ("worked on", "spearheaded"),
    ("helped", "led"),
)
DESCRIPTION_RULES = _word_rules(
    ("responsible for", "led"),
    ("worked with", "collaborated with"),
    ("made", "created"),
    ("improved", "optimized"),
)
HIGHLIGHT_RULES = _word_rules(("improved", "increased"))


@dataclass(frozen=True)
class ContentFeedback:
    """Score (60-99) and a one-line verdict for a block of resume content."""

    score: int
    feedback: str


def _apply_rules(text: str, rules: List[Tuple[Pattern, str]]) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def enhance_summary(text: str) -> str:
    if len(text) < SUMMARY_MIN_LENGTH:
        return text + SUMMARY_SUFFIX
    return _apply_rules(text, SUMMARY_RULES)


def enhance_description(text: str) -> str:
    if len(text) < DESCRIPTION_MIN_LENGTH:
        return text + DESCRIPTION_SUFFIX
    return _apply_rules(text, DESCRIPTION_RULES)


def enhance_highlights(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Strengthen newline-delimited highlight bullets.

    Bullets that already open with an action verb get sharper wording; others are
    prefixed with a randomly chosen action verb. Short lists gain one extra bullet.
    """
    rng = rng or random.Random()
    bullets = [line for line in text.splitlines() if line.strip()]

    enhanced = []
    for bullet in bullets:
        if _STARTS_WITH_ACTION_VERB.match(bullet):
            enhanced.append(_PERCENTAGE.sub("by 35%", _apply_rules(bullet, HIGHLIGHT_RULES)))
        else:
            verb = rng.choice(ACTION_VERBS)
            enhanced.append(f"{verb} {bullet[:1].lower()}{bullet[1:]}")

    if len(bullets) < MIN_HIGHLIGHTS:
        enhanced.append(EXTRA_HIGHLIGHT)

    return "\n".join(enhanced)


async def enhance(
    text: str,
    field_kind: str,
    delay: float = ENHANCE_DELAY_SECONDS,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Return an improved version of a field's text.

    Args:
        text: Current field value (highlights as newline-delimited text)
        field_kind: "summary", "description" or "highlights"; other kinds are returned unchanged
        delay: Simulated service latency in seconds
        rng: Random source for verb selection (tests pass a seeded Random)

    Returns:
        Improved text; blank input is returned as-is
    """
    if delay:
        await asyncio.sleep(delay)

    if not text or not text.strip():
        return text

    kind = getattr(field_kind, "value", field_kind)
    if kind == "summary":
        return enhance_summary(text)
    elif kind == "description":
        return enhance_description(text)
    elif kind == "highlights":
        return enhance_highlights(text, rng)

    _log_debug(f"No enhancement rules for '{kind}'; returning text unchanged")
    return text


async def get_content_feedback(
    section: str,
    content: str,
    delay: float = ENHANCE_DELAY_SECONDS,
    rng: Optional[random.Random] = None,
) -> ContentFeedback:
    """
    Score a block of content and return a short verdict.

    Args:
        section: Section the content came from (e.g., "experience")
        content: Text being assessed
        delay: Simulated service latency in seconds
        rng: Random source for the score
    """
    if delay:
        await asyncio.sleep(delay)

    rng = rng or random.Random()
    score = rng.randint(60, 99)

    if score < 70:
        feedback = (
            "This content needs significant improvement. Consider adding more specifics"
            " and achievements."
        )
    elif score < 85:
        feedback = (
            "Good content, but could be enhanced with more specific metrics and accomplishments."
        )
    else:
        feedback = "Excellent content! It effectively communicates your experience and achievements."

    _log_debug(f"Scored {section} content ({len(content)} chars): {score}")
    return ContentFeedback(score=score, feedback=feedback)
