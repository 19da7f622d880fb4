"""
tests/test_reports.py
─────────────────────
Tests for report formatting and assembly.
"""
from datetime import date, datetime, timedelta

from handover.data.models import NoteType, Priority, Shift
from handover.data.store import newest_first
from handover.reports.assembler import (
    QUIET_SHIFT_HEADLINE,
    QUIET_WEEK_HEADLINE,
    build_handover_summary,
    build_previous_shift_report,
    build_status_query,
    build_weekly_summary,
    recurring_units,
)
from handover.reports.formatting import (
    DIVIDER,
    format_date,
    format_short_date,
    format_time,
    pending_items,
)
from handover.reports.safety import SAFETY_REMINDERS, format_safety_reminder, reminder_for


class TestFormatting:
    def test_format_time(self):
        assert format_time(datetime(2024, 6, 1, 14, 5)) == "2:05 PM"
        assert format_time(datetime(2024, 6, 1, 0, 30)) == "12:30 AM"
        assert format_time(datetime(2024, 6, 1, 12, 0)) == "12:00 PM"

    def test_format_date(self):
        assert format_date(datetime(2024, 6, 1, 9, 0)) == "Saturday, June 1, 2024"

    def test_format_short_date(self):
        assert format_short_date(datetime(2024, 6, 1, 9, 0)) == "Sat Jun 1"

    def test_newest_first(self, make_note, now):
        old = make_note("old", timestamp=now - timedelta(hours=2))
        new = make_note("new", timestamp=now)
        assert [n.note for n in newest_first([old, new])] == ["new", "old"]

    def test_pending_items(self, make_note):
        notes = [
            make_note("maint", type=NoteType.MAINTENANCE, priority=Priority.MEDIUM),
            make_note("alert", type=NoteType.ALERT, priority=Priority.HIGH),
            make_note("urgent status", type=NoteType.STATUS, priority=Priority.HIGH),
            make_note("quiet status", type=NoteType.STATUS, priority=Priority.LOW),
            make_note("closed", type=NoteType.MAINTENANCE, resolved=True),
        ]
        assert [n.note for n in pending_items(notes)] == ["maint", "alert", "urgent status"]


class TestStatusQuery:
    def test_empty(self):
        result = build_status_query([], Shift.DAY)
        assert "No notes logged for the current shift yet." in result.formatted_summary
        assert result.total_notes == 0

    def test_empty_with_unit_filter(self):
        result = build_status_query([], Shift.DAY, unit_filter="Unit 5")
        assert "No notes found for Unit 5 in the current shift." in result.formatted_summary

    def test_grouped_sections(self, make_note):
        notes = [
            make_note("Pump seal repair", type=NoteType.MAINTENANCE),
            make_note("Pressure spike", type=NoteType.ALERT, priority=Priority.HIGH),
        ]
        result = build_status_query(notes, Shift.DAY)
        text = result.formatted_summary
        assert "Current Shift: Day Shift (6:00 AM - 2:00 PM)" in text
        assert "🔧 MAINTENANCE:\n• Pump seal repair\n  (Unit 5, 9:00 AM)" in text
        assert "• Pressure spike ⚠️" in text
        assert "📊 STATUS UPDATES:\n• None" in text
        assert "GENERAL NOTES" not in text
        assert result.maintenance_count == 1
        assert result.alert_count == 1

    def test_filter_headers(self, make_note):
        notes = [make_note(type=NoteType.MAINTENANCE)]
        text = build_status_query(notes, Shift.DAY, unit_filter="5", type_filter=NoteType.MAINTENANCE).formatted_summary
        assert "Filtering by: Unit 5" in text
        assert "Filtering by: Maintenance notes" in text


class TestPreviousShiftReport:
    def test_empty(self, now):
        result = build_previous_shift_report([], Shift.NIGHT, Shift.DAY, now)
        assert result.formatted_report.startswith("🔄 PREVIOUS SHIFT REPORT")
        assert "No notes were logged for Night Shift." in result.formatted_report

    def test_pending_section(self, make_note, now):
        notes = [
            make_note("Pump 5 seal leaking", type=NoteType.MAINTENANCE, shift=Shift.NIGHT),
            make_note("Temperature stable", type=NoteType.STATUS, shift=Shift.NIGHT),
        ]
        result = build_previous_shift_report(notes, Shift.NIGHT, Shift.DAY, now)
        text = result.formatted_report
        assert "From: Night Shift (10:00 PM - 6:00 AM)" in text
        assert "⏭️ PENDING FOR DAY SHIFT:\n🔧 Unit 5: Pump 5 seal leaking" in text
        assert "• Unresolved items: 1" in text
        assert result.unresolved_count == 1


class TestHandoverSummary:
    def test_quiet_shift(self, now):
        result = build_handover_summary([], Shift.DAY, now)
        assert QUIET_SHIFT_HEADLINE in result.summary
        assert result.to_shift == Shift.AFTERNOON
        assert result.unresolved_count == 0
        assert "Afternoon Shift team, you're good to go!" in result.summary

    def test_action_items_tagged(self, make_note, now):
        notes = [
            make_note("Emergency shutdown drill", type=NoteType.ALERT, priority=Priority.CRITICAL),
            make_note("Pump seal repair", type=NoteType.MAINTENANCE, priority=Priority.MEDIUM),
        ]
        result = build_handover_summary(notes, Shift.DAY, now)
        text = result.summary
        assert text.startswith("☀️ SHIFT HANDOVER SUMMARY\n" + DIVIDER)
        assert "⚠️ Unit 5: Emergency shutdown drill [CRITICAL]" in text
        assert "🔧 Unit 5: Pump seal repair\n" in text
        assert "• Pending for next shift: 2" in text
        assert result.unresolved_count == 2

    def test_no_pending_items(self, make_note, now):
        result = build_handover_summary([make_note("Shift meeting held")], Shift.NIGHT, now)
        assert "• No pending action items - routine operations" in result.summary
        assert "📋 GENERAL NOTES:" in result.summary
        assert result.to_shift == Shift.DAY


class TestWeeklySummary:
    def test_quiet_week(self, now):
        result = build_weekly_summary([], [], now - timedelta(days=7), now, days=7)
        assert QUIET_WEEK_HEADLINE in result.summary
        assert "in the last 7 days" in result.summary
        assert result.resolution_rate is None

    def test_quiet_week_with_abnormal_readings(self, make_reading, now):
        readings = [make_reading(160.0), make_reading(200.0)]
        result = build_weekly_summary([], readings, now - timedelta(days=7), now, days=7)
        assert "• P-101 pressure: 1 critical, 1 warning" in result.summary
        assert result.abnormal_reading_count == 2

    def test_recurring_and_statistics(self, make_note, now):
        notes = [
            make_note("Pump seal repair", unit="5", type=NoteType.MAINTENANCE, timestamp=now - timedelta(days=2)),
            make_note("Pump seal leaking again", unit="5", type=NoteType.ALERT, priority=Priority.HIGH),
            make_note("Tower 2 cleaning", unit="2", type=NoteType.MAINTENANCE, resolved=True),
            make_note("Temperature stable", unit="2", type=NoteType.STATUS, shift=Shift.NIGHT),
        ]
        result = build_weekly_summary(notes, [], now - timedelta(days=7), now, days=7)
        text = result.summary
        assert result.recurring_units == ["5"]
        assert "• Unit 5: 2 maintenance/alert notes" in text
        assert "Day Shift: 3 | Afternoon Shift: 0 | Night Shift: 1" in text
        assert "• Thu May 30: 1" in text
        assert "• Sat Jun 1: 3" in text
        assert result.resolution_rate == 33.3
        assert result.unresolved_count == 2
        assert "• No abnormal readings recorded" in text

    def test_recurring_units_threshold(self, make_note):
        notes = [make_note(unit="7", type=NoteType.ALERT)] * 3 + [make_note(unit="8", type=NoteType.STATUS)] * 3
        counts = recurring_units(notes)
        assert list(counts.index) == ["7"]
        assert int(counts["7"]) == 3


class TestSafetyReminder:
    def test_rotation_by_day_of_year(self):
        # Day-of-year 1 → index 1
        assert reminder_for(date(2024, 1, 1)) == SAFETY_REMINDERS[1]
        assert reminder_for(date(2024, 1, 5)) == SAFETY_REMINDERS[0]

    def test_deterministic_within_a_day(self):
        morning = format_safety_reminder(datetime(2024, 6, 1, 6, 0))
        evening = format_safety_reminder(datetime(2024, 6, 1, 23, 0))
        assert morning == evening

    def test_layout(self):
        text = format_safety_reminder(date(2024, 1, 1))
        assert text.startswith("🛡️ DAILY SAFETY REMINDER\n\nToday's Focus: Emergency Procedures\n\n")
