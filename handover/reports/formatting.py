"""
handover/reports/formatting.py
──────────────────────────────
Shared text formatting for handover reports.

The divider, section markers and fallback lines are consumed by downstream
displays; keep them byte-stable.
"""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from config.notes import PENDING_PRIORITIES, PENDING_TYPES
from handover.analytics.shift_clock import to_facility_time
from handover.data.models import NoteType, Priority, ShiftNote
from handover.data.store import newest_first

DIVIDER = "═══════════════════════════════════"

MAINTENANCE_MARKER = "🔧"
ALERT_MARKER = "⚠️"
STATUS_MARKER = "📊"
GENERAL_MARKER = "📋"

PRIORITY_FLAGS: dict[Priority, str] = {
    Priority.CRITICAL: " 🚨",
    Priority.HIGH: " ⚠️",
}

TYPE_MARKERS: dict[NoteType, str] = {
    NoteType.MAINTENANCE: MAINTENANCE_MARKER,
    NoteType.ALERT: ALERT_MARKER,
    NoteType.STATUS: STATUS_MARKER,
    NoteType.GENERAL: GENERAL_MARKER,
}


def format_time(t: datetime) -> str:
    """12-hour wall clock time, e.g. "2:05 PM"."""
    local = to_facility_time(t)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_date(t: datetime) -> str:
    """Long date, e.g. "Monday, October 19, 2026"."""
    local = to_facility_time(t)
    return f"{local.strftime('%A')}, {local.strftime('%B')} {local.day}, {local.year}"


def format_short_date(t: datetime) -> str:
    """e.g. "Mon Oct 19"."""
    local = to_facility_time(t)
    return f"{local.strftime('%a %b')} {local.day}"


def group_by_type(notes: Iterable[ShiftNote]) -> dict[NoteType, list[ShiftNote]]:
    grouped: dict[NoteType, list[ShiftNote]] = {t: [] for t in NoteType}
    for note in notes:
        grouped[note.type].append(note)
    return grouped


def pending_items(notes: Iterable[ShiftNote]) -> list[ShiftNote]:
    """Unresolved notes that need attention from the incoming shift."""
    return [
        n
        for n in notes
        if not n.resolved
        and (n.type.value in PENDING_TYPES or n.priority.value in PENDING_PRIORITIES)
    ]


def format_notes_list(notes: Iterable[ShiftNote], template: str, empty: str = "• None") -> str:
    """
    Bullet list of notes, newest first.

    `template` is a str.format pattern receiving note, unit, time and flag.
    """
    ordered = newest_first(notes)
    if not ordered:
        return empty
    return "\n".join(
        template.format(
            note=n.note,
            unit=n.unit,
            time=format_time(n.timestamp),
            flag=PRIORITY_FLAGS.get(n.priority, ""),
        )
        for n in ordered
    )
