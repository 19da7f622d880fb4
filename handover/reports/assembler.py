"""
handover/reports/assembler.py
─────────────────────────────
Report assembly: turns store query results into the formatted handover texts.

Every builder is a pure function of its inputs (notes, readings, shifts and
the reporting instant) and never touches a store, so the same inputs always
render the same text.

Report skeleton:
  header     shift identity, time range, date
  sections   maintenance / alerts / status updates / general, newest first
  pending    unresolved maintenance or alert notes, or high/critical priority
  statistics counts per category, total, pending

Each report has its own zero-notes branch with dedicated wording.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from config.notes import PENDING_TYPES
from config.shifts import SHIFT_EMOJIS
from handover.analytics.evaluator import format_deviation
from handover.analytics.shift_clock import next_shift, shift_name, shift_time_range, to_facility_time
from handover.data.models import (
    EquipmentReading,
    HandoverSummaryResult,
    NoteType,
    OperatingRange,
    Parameter,
    Priority,
    ReadingStatus,
    Shift,
    ShiftNote,
    ShiftReportResult,
    StatusQueryResult,
    TrendAnalysis,
    TrendDirection,
    WeeklySummaryResult,
)
from handover.data.store import newest_first
from handover.reports.formatting import (
    DIVIDER,
    PRIORITY_FLAGS,
    TYPE_MARKERS,
    format_date,
    format_notes_list,
    format_short_date,
    format_time,
    group_by_type,
    pending_items,
)

STATUS_NOTE = "• {note}{flag}\n  (Unit {unit}, {time})"
REPORT_NOTE = "• Unit {unit}: {note}{flag}\n  ({time})"
HANDOVER_NOTE = "• Unit {unit}: {note}{flag}\n  (Logged: {time})"

QUIET_SHIFT_HEADLINE = "✅ QUIET SHIFT - ALL SYSTEMS NORMAL"
QUIET_WEEK_HEADLINE = "✅ QUIET WEEK - NO NOTES LOGGED"

PRIORITY_TAGS: dict[Priority, str] = {
    Priority.CRITICAL: " [CRITICAL]",
    Priority.HIGH: " [HIGH PRIORITY]",
}

RECURRING_THRESHOLD = 2


def _unit_label(unit_filter: str) -> str:
    return re.sub(r"\D", "", unit_filter) or unit_filter


def _counts(grouped: dict[NoteType, list[ShiftNote]], total: int) -> dict[str, int]:
    return {
        "total_notes": total,
        "maintenance_count": len(grouped[NoteType.MAINTENANCE]),
        "alert_count": len(grouped[NoteType.ALERT]),
        "status_count": len(grouped[NoteType.STATUS]),
        "general_count": len(grouped[NoteType.GENERAL]),
    }


def _section(title: str, notes: list[ShiftNote], template: str, empty: str) -> str:
    return f"{title}\n{format_notes_list(notes, template, empty)}\n\n"


# ── Status query ──────────────────────────────────────────────────────────────

def build_status_query(
    notes: Sequence[ShiftNote],
    current: Shift,
    unit_filter: str | None = None,
    type_filter: NoteType | None = None,
) -> StatusQueryResult:
    grouped = group_by_type(notes)
    header = f"Current Shift: {shift_name(current)} ({shift_time_range(current)})\n"

    if not notes:
        text = header + "\n"
        if unit_filter:
            text += f"No notes found for Unit {_unit_label(unit_filter)} in the current shift.\n"
        else:
            text += "No notes logged for the current shift yet.\n"
        text += '\nYou can log notes using: "Log: [your note]"'
    else:
        text = header
        if unit_filter:
            text += f"Filtering by: Unit {_unit_label(unit_filter)}\n"
        if type_filter:
            text += f"Filtering by: {type_filter.value.capitalize()} notes\n"
        text += f"\n{DIVIDER}\n\n"
        text += _section("🔧 MAINTENANCE:", grouped[NoteType.MAINTENANCE], STATUS_NOTE, "• None")
        text += _section("⚠️ ALERTS:", grouped[NoteType.ALERT], STATUS_NOTE, "• None")
        text += _section("📊 STATUS UPDATES:", grouped[NoteType.STATUS], STATUS_NOTE, "• None")
        if grouped[NoteType.GENERAL]:
            text += _section("📋 GENERAL NOTES:", grouped[NoteType.GENERAL], STATUS_NOTE, "• None")
        text += f"{DIVIDER}\n"
        text += f"📊 Total Notes: {len(notes)}\n"
        text += (
            f"🔧 Maintenance: {len(grouped[NoteType.MAINTENANCE])} | "
            f"⚠️ Alerts: {len(grouped[NoteType.ALERT])} | "
            f"📊 Status: {len(grouped[NoteType.STATUS])}"
        )

    return StatusQueryResult(
        shift=current,
        time_range=shift_time_range(current),
        formatted_summary=text,
        **_counts(grouped, len(notes)),
    )


# ── Previous shift report ─────────────────────────────────────────────────────

def build_previous_shift_report(
    notes: Sequence[ShiftNote],
    target: Shift,
    current: Shift,
    now: datetime,
) -> ShiftReportResult:
    grouped = group_by_type(notes)
    pending = pending_items(notes)

    if not notes:
        text = "🔄 PREVIOUS SHIFT REPORT\n\n"
        text += f"No notes were logged for {shift_name(target)}.\n"
        text += "This could mean:\n"
        text += "• The shift was uneventful (all systems normal)\n"
        text += "• Notes weren't logged in the system\n\n"
        text += f"Current Shift: {shift_name(current)} ({shift_time_range(current)})"
    else:
        text = "🔄 SHIFT HANDOVER REPORT\n"
        text += f"From: {shift_name(target)} ({shift_time_range(target)})\n"
        text += f"To: {shift_name(current)} ({shift_time_range(current)})\n"
        text += f"Date: {format_date(now)}\n\n"
        text += f"{DIVIDER}\n\n"
        text += _section(
            "🔧 MAINTENANCE ACTIVITIES:", grouped[NoteType.MAINTENANCE], REPORT_NOTE,
            "• No maintenance activities reported",
        )
        text += _section(
            "⚠️ ALERTS & WARNINGS:", grouped[NoteType.ALERT], REPORT_NOTE,
            "• No alerts reported",
        )
        text += _section(
            "📊 STATUS UPDATES:", grouped[NoteType.STATUS], REPORT_NOTE,
            "• No status updates reported",
        )
        if grouped[NoteType.GENERAL]:
            text += _section("📋 GENERAL NOTES:", grouped[NoteType.GENERAL], REPORT_NOTE, "• None reported")

        text += f"⏭️ PENDING FOR {shift_name(current).upper()}:\n"
        if pending:
            for note in pending:
                text += f"{TYPE_MARKERS[note.type]} Unit {note.unit}: {note.note}\n"
            text += "\n"
        else:
            text += "• No pending items\n\n"

        text += f"{DIVIDER}\n"
        text += "📋 SUMMARY:\n"
        text += f"• Total notes logged: {len(notes)}\n"
        text += (
            f"• Maintenance: {len(grouped[NoteType.MAINTENANCE])} | "
            f"Alerts: {len(grouped[NoteType.ALERT])} | "
            f"Status: {len(grouped[NoteType.STATUS])}\n"
        )
        text += f"• Unresolved items: {len(pending)}\n"

    return ShiftReportResult(
        shift=target,
        time_range=shift_time_range(target),
        unresolved_count=len(pending),
        formatted_report=text,
        **_counts(grouped, len(notes)),
    )


# ── Handover summary ──────────────────────────────────────────────────────────

def _handover_header(shift: Shift, incoming: Shift, now: datetime, with_time: bool) -> str:
    text = f"{SHIFT_EMOJIS[shift.value]} SHIFT HANDOVER SUMMARY\n"
    text += f"{DIVIDER}\n"
    text += f"From: {shift_name(shift)} ({shift_time_range(shift)})\n"
    text += f"To: {shift_name(incoming)} ({shift_time_range(incoming)})\n"
    text += f"Date: {format_date(now)}\n"
    if with_time:
        text += f"Time: {format_time(now)}\n"
    return text + f"\n{DIVIDER}\n\n"


def _handover_closing(incoming: Shift) -> str:
    return (
        f"{DIVIDER}\n"
        "\n✅ Handover complete. Stay safe! 🛡️\n"
        f"{shift_name(incoming)} team, you're good to go! 👍"
    )


def build_handover_summary(
    notes: Sequence[ShiftNote],
    shift: Shift,
    now: datetime,
) -> HandoverSummaryResult:
    incoming = next_shift(shift)
    grouped = group_by_type(notes)
    pending = pending_items(notes)

    if not notes:
        text = _handover_header(shift, incoming, now, with_time=False)
        text += f"{QUIET_SHIFT_HEADLINE}\n\n"
        text += f"No specific notes were logged during {shift_name(shift)}.\n"
        text += "All units operating within normal parameters.\n"
        text += "No maintenance, alerts, or status changes to report.\n\n"
        text += f"⏭️ No pending action items for {shift_name(incoming)}.\n\n"
        text += _handover_closing(incoming)
    else:
        text = _handover_header(shift, incoming, now, with_time=True)
        text += _section(
            "🔧 MAINTENANCE ACTIVITIES:", grouped[NoteType.MAINTENANCE], HANDOVER_NOTE,
            "• No maintenance activities during this shift",
        )
        text += _section(
            "⚠️ ALERTS & WARNINGS:", grouped[NoteType.ALERT], HANDOVER_NOTE,
            "• No alerts reported - all systems normal",
        )
        text += _section(
            "📊 STATUS UPDATES:", grouped[NoteType.STATUS], HANDOVER_NOTE,
            "• No specific status updates logged",
        )
        if grouped[NoteType.GENERAL]:
            text += _section("📋 GENERAL NOTES:", grouped[NoteType.GENERAL], HANDOVER_NOTE, "• None reported")

        text += f"⏭️ ACTION ITEMS FOR {shift_name(incoming).upper()}:\n"
        if pending:
            for note in pending:
                text += (
                    f"{TYPE_MARKERS[note.type]} Unit {note.unit}: {note.note}"
                    f"{PRIORITY_TAGS.get(note.priority, '')}\n"
                )
            text += "\n"
        else:
            text += "• No pending action items - routine operations\n\n"

        text += f"{DIVIDER}\n"
        text += "📊 SHIFT STATISTICS:\n"
        text += f"• Total notes logged: {len(notes)}\n"
        text += "• Breakdown:\n"
        text += f"  - 🔧 Maintenance: {len(grouped[NoteType.MAINTENANCE])}\n"
        text += f"  - ⚠️ Alerts: {len(grouped[NoteType.ALERT])}\n"
        text += f"  - 📊 Status Updates: {len(grouped[NoteType.STATUS])}\n"
        text += f"  - 📋 General: {len(grouped[NoteType.GENERAL])}\n"
        text += f"• Pending for next shift: {len(pending)}\n\n"
        text += _handover_closing(incoming)

    return HandoverSummaryResult(
        from_shift=shift,
        to_shift=incoming,
        unresolved_count=len(pending),
        summary=text,
        **_counts(grouped, len(notes)),
    )


# ── Weekly summary ────────────────────────────────────────────────────────────

def _notes_frame(notes: Sequence[ShiftNote]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "unit": n.unit,
                "type": n.type.value,
                "shift": n.shift.value,
                "day": to_facility_time(n.timestamp).date(),
                "resolved": n.resolved,
            }
            for n in notes
        ],
        columns=["unit", "type", "shift", "day", "resolved"],
    )


def recurring_units(notes: Sequence[ShiftNote], threshold: int = RECURRING_THRESHOLD) -> pd.Series:
    """Maintenance/alert note count per unit, for units at or above `threshold`."""
    df = _notes_frame(notes)
    actionable = df[df["type"].isin(PENDING_TYPES)]
    counts = actionable.groupby("unit").size().sort_values(ascending=False, kind="stable")
    return counts[counts >= threshold]


def _weekly_note_line(note: ShiftNote) -> str:
    flag = PRIORITY_FLAGS.get(note.priority, "")
    return (
        f"• Unit {note.unit}: {note.note}{flag}\n"
        f"  ({format_short_date(note.timestamp)}, {format_time(note.timestamp)}, {shift_name(note.shift)})"
    )


def _equipment_exceptions(readings: Sequence[EquipmentReading]) -> list[str]:
    if not readings:
        return []
    df = pd.DataFrame(
        [{"equipment_id": r.equipment_id, "parameter": r.parameter.value, "status": r.status.value} for r in readings]
    )
    table = df.groupby(["equipment_id", "parameter", "status"]).size().unstack(fill_value=0)
    lines = []
    for (equipment_id, parameter), row in table.iterrows():
        parts = [
            f"{int(row[status.value])} {status.value}"
            for status in (ReadingStatus.CRITICAL, ReadingStatus.WARNING)
            if status.value in row.index and row[status.value] > 0
        ]
        lines.append(f"• {equipment_id} {parameter.replace('_', ' ')}: {', '.join(parts)}")
    return lines


def build_weekly_summary(
    notes: Sequence[ShiftNote],
    abnormal_readings: Sequence[EquipmentReading],
    window_start: datetime,
    window_end: datetime,
    days: int,
) -> WeeklySummaryResult:
    """
    Multi-day roll-up of logged notes and abnormal equipment readings.

    Args:
        notes: Notes logged inside the window
        abnormal_readings: Warning/critical readings inside the window
        window_start: First instant covered
        window_end: Reporting instant
        days: Window length in days, as requested by the caller
    """
    grouped = group_by_type(notes)
    actionable = [n for n in notes if n.type.value in PENDING_TYPES]
    pending = pending_items(notes)
    resolved = sum(1 for n in actionable if n.resolved)
    rate = round(resolved / len(actionable) * 100.0, 1) if actionable else None
    recurring = recurring_units(notes) if notes else pd.Series(dtype=int)

    text = "📅 WEEKLY MAINTENANCE SUMMARY\n"
    text += f"{DIVIDER}\n"
    text += f"Period: {format_date(window_start)} - {format_date(window_end)}\n\n"
    text += f"{DIVIDER}\n\n"

    if not notes:
        text += f"{QUIET_WEEK_HEADLINE}\n\n"
        text += f"No maintenance, alerts, or status notes were logged in the last {days} days.\n"
        if abnormal_readings:
            text += f"⚠️ {len(abnormal_readings)} abnormal equipment reading(s) were recorded - review below.\n\n"
            text += "🏭 EQUIPMENT EXCEPTIONS:\n" + "\n".join(_equipment_exceptions(abnormal_readings)) + "\n"
        else:
            text += "All recorded equipment readings stayed within normal ranges.\n"
        text += f"\n{DIVIDER}"
    else:
        maintenance = newest_first(grouped[NoteType.MAINTENANCE])
        alerts = newest_first(grouped[NoteType.ALERT])

        text += "🔧 MAINTENANCE ACTIVITIES:\n"
        text += ("\n".join(_weekly_note_line(n) for n in maintenance) or "• No maintenance activities this week")
        text += "\n\n⚠️ ALERTS & WARNINGS:\n"
        text += ("\n".join(_weekly_note_line(n) for n in alerts) or "• No alerts this week")
        text += "\n\n🔁 RECURRING ISSUES:\n"
        if len(recurring):
            text += "\n".join(
                f"• Unit {unit}: {count} maintenance/alert notes" for unit, count in recurring.items()
            )
        else:
            text += "• No recurring issues detected"

        df = _notes_frame(notes)
        by_shift = df.groupby("shift").size()
        by_day = df.groupby("day").size().sort_index()
        text += "\n\n📈 ACTIVITY BY SHIFT:\n"
        text += " | ".join(f"{shift_name(s)}: {int(by_shift.get(s.value, 0))}" for s in Shift)
        text += "\n\n📆 ACTIVITY BY DAY:\n"
        text += "\n".join(
            f"• {format_short_date(datetime(day.year, day.month, day.day))}: {int(count)}"
            for day, count in by_day.items()
        )

        text += "\n\n🏭 EQUIPMENT EXCEPTIONS:\n"
        text += "\n".join(_equipment_exceptions(abnormal_readings)) or "• No abnormal readings recorded"

        text += f"\n\n{DIVIDER}\n"
        text += "📊 WEEKLY STATISTICS:\n"
        text += f"• Total notes logged: {len(notes)}\n"
        text += (
            f"• Maintenance: {len(grouped[NoteType.MAINTENANCE])} | "
            f"Alerts: {len(grouped[NoteType.ALERT])} | "
            f"Status: {len(grouped[NoteType.STATUS])} | "
            f"General: {len(grouped[NoteType.GENERAL])}\n"
        )
        if rate is None:
            text += "• Resolution rate: n/a (no maintenance or alert notes)\n"
        else:
            text += f"• Resolution rate: {rate}% ({resolved} of {len(actionable)} action items closed)\n"
        text += f"• Open action items: {len(pending)}\n"
        text += f"• Abnormal equipment readings: {len(abnormal_readings)}\n"
        text += DIVIDER

    return WeeklySummaryResult(
        window_start=window_start,
        window_end=window_end,
        unresolved_count=len(pending),
        resolution_rate=rate,
        abnormal_reading_count=len(abnormal_readings),
        recurring_units=[str(u) for u in recurring.index],
        summary=text,
        **_counts(grouped, len(notes)),
    )


# ── Equipment reading confirmation ────────────────────────────────────────────

def build_reading_message(
    reading: EquipmentReading,
    recommendation: str,
    trend: TrendAnalysis,
) -> str:
    uom = reading.uom
    text = f"✓ Reading Recorded - {shift_name(reading.shift)}\n\n"
    text += f"📍 EQUIPMENT: {reading.equipment_id} ({reading.equipment_type.value.upper()})\n"
    text += f"📊 PARAMETER: {reading.parameter.value.upper().replace('_', ' ')}\n"
    text += f"📈 VALUE: {reading.value:g} {uom}\n"
    text += f"🎯 NORMAL RANGE: {reading.normal_min:g} - {reading.normal_max:g} {uom}\n"
    text += f"⚠️ CRITICAL RANGE: {reading.critical_min:g} - {reading.critical_max:g} {uom}\n"
    text += f"📉 DEVIATION: {format_deviation(reading.deviation)}\n"
    text += f"🚦 STATUS: {reading.status.value.upper()}\n"
    text += f"⏰ TIME: {format_time(reading.timestamp)}\n"
    text += f"🏭 UNIT: {reading.unit}\n"
    if reading.operator:
        text += f"👤 OPERATOR: {reading.operator}\n"
    text += f"\n{recommendation}"
    if trend.direction == TrendDirection.INSUFFICIENT_DATA:
        text += "\n"
    text += trend.text
    return text


def build_reading_rejection(
    equipment_id: str,
    parameter: Parameter,
    normal_min: float | None,
    normal_max: float | None,
    current: OperatingRange,
    uom: str | None = None,
) -> str:
    """Explain why operator-supplied normal bounds were refused."""
    low = current.min if normal_min is None else normal_min
    high = current.max if normal_max is None else normal_max
    uom = uom or current.uom
    text = f"✗ Reading Not Recorded - {equipment_id} {parameter.value.upper().replace('_', ' ')}\n\n"
    text += (
        f"Requested normal range {low:g} - {high:g} {uom} does not fit inside "
        f"the critical range {current.critical_min:g} - {current.critical_max:g} {uom}.\n"
    )
    text += "Normal bounds must satisfy: critical min ≤ normal min ≤ normal max ≤ critical max.\n"
    text += f"No reading was stored and the range for {equipment_id} is unchanged."
    return text
