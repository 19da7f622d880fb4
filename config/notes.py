"""
config/notes.py
───────────────
Keyword tables for shift-note classification.

Rule tables are evaluated top to bottom, first match wins. Safety language
(alerts) is listed before routine language so it always dominates.
"""

# Unit identifier patterns, tried in order (case-insensitive)
UNIT_PATTERNS: list[str] = [
    r"unit\s*(\d+)",
    r"u(\d+)",
    r"reactor\s*(\d+)",
    r"pump\s*(\d+)",
    r"tower\s*(\d+)",
]

DEFAULT_UNIT = "General"

# ── Categorization: (note_type, keywords) ────────────────────────────────────
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("alert", ("alert", "warning", "spike", "urgent", "critical", "emergency")),
    ("maintenance", ("maintenance", "repair", "inspection", "cleaning", "service", "fix")),
    ("status", ("pressure", "temperature", "psi", "stable", "normal", "operating")),
]

DEFAULT_CATEGORY = "general"

# ── Priority: (priority, keywords, note types that also trigger it) ──────────
PRIORITY_RULES: list[tuple[str, tuple[str, ...], tuple[str, ...]]] = [
    ("critical", ("critical", "emergency", "shutdown", "failure"), ()),
    ("high", ("urgent", "immediate", "alert"), ("alert",)),
    ("medium", ("attention",), ("maintenance",)),
]

DEFAULT_PRIORITY = "low"

# Notes that carry into the next shift's action list
PENDING_TYPES: tuple[str, ...] = ("maintenance", "alert")
PENDING_PRIORITIES: tuple[str, ...] = ("high", "critical")
