"""
handover/analytics/classifier.py
────────────────────────────────
Rule-based shift-note classifier.

Three independent decisions are taken from the raw note text:
  - unit      : first matching pattern in UNIT_PATTERNS, else "General"
  - category  : first matching row of the category table, else "general"
  - priority  : first matching row of the priority table, else "low"

Keyword matching is case-insensitive substring matching. The tables are
built from config/notes.py so the precedence order lives in one place.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from config.notes import (
    CATEGORY_RULES,
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_UNIT,
    PRIORITY_RULES,
    UNIT_PATTERNS,
)
from handover.data.models import NoteType, Priority

_UNIT_REGEXES = [re.compile(p, re.IGNORECASE) for p in UNIT_PATTERNS]

CategoryPredicate = Callable[[str], bool]
PriorityPredicate = Callable[[str, NoteType], bool]


@dataclass(frozen=True)
class Classification:
    unit: str
    type: NoteType
    priority: Priority


def _mentions(keywords: tuple[str, ...]) -> CategoryPredicate:
    def predicate(text: str) -> bool:
        lowered = text.lower()
        return any(k in lowered for k in keywords)

    return predicate


def _mentions_or_typed(keywords: tuple[str, ...], types: tuple[str, ...]) -> PriorityPredicate:
    mentions = _mentions(keywords)

    def predicate(text: str, note_type: NoteType) -> bool:
        return NoteType(note_type).value in types or mentions(text)

    return predicate


# ── Rule tables (evaluated top to bottom, first match wins) ──────────────────

CATEGORY_TABLE: list[tuple[CategoryPredicate, NoteType]] = [
    (_mentions(keywords), NoteType(category)) for category, keywords in CATEGORY_RULES
]

PRIORITY_TABLE: list[tuple[PriorityPredicate, Priority]] = [
    (_mentions_or_typed(keywords, types), Priority(level))
    for level, keywords, types in PRIORITY_RULES
]


# ── Public API ────────────────────────────────────────────────────────────────

def extract_unit(text: str) -> str:
    """Return the unit number mentioned in `text`, or "General"."""
    for regex in _UNIT_REGEXES:
        match = regex.search(text)
        if match:
            return match.group(1)
    return DEFAULT_UNIT


def categorize(text: str) -> NoteType:
    for predicate, category in CATEGORY_TABLE:
        if predicate(text):
            return category
    return NoteType(DEFAULT_CATEGORY)


def determine_priority(text: str, note_type: NoteType) -> Priority:
    for predicate, level in PRIORITY_TABLE:
        if predicate(text, note_type):
            return level
    return Priority(DEFAULT_PRIORITY)


def classify(
    text: str,
    unit: str | None = None,
    note_type: NoteType | str | None = None,
) -> Classification:
    """
    Classify a free-text note.

    Explicit `unit` / `note_type` values short-circuit extraction; priority is
    always derived, using the final note type.
    """
    final_unit = unit or extract_unit(text)
    final_type = NoteType(note_type) if note_type else categorize(text)
    return Classification(
        unit=final_unit,
        type=final_type,
        priority=determine_priority(text, final_type),
    )
