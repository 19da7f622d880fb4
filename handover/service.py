"""
handover/service.py
───────────────────
Shift handover service: the operations offered to the conversational layer.

  log_note                   classify + store a free-text note
  query_status               current-shift (or all) notes, filtered
  get_previous_shift_report  report for the shift that just ended
  generate_handover_summary  outgoing → incoming shift summary
  record_equipment_reading   evaluate, store and trend a reading

plus the weekly roll-up, the daily safety reminder and equipment history
lookups. Stores, range registry and clock are injected so every instance is
isolated; the defaults give a fresh in-memory setup on the facility clock.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from pydantic import ValidationError

from config.settings import settings
from handover.analytics.classifier import classify
from handover.analytics.evaluator import evaluate, recommend
from handover.analytics.shift_clock import (
    current_shift,
    facility_now,
    next_handover_time,
    previous_shift,
    shift_name,
)
from handover.analytics.trends import analyze_trend
from handover.data.models import (
    EquipmentReading,
    EquipmentType,
    HandoverSummaryResult,
    NoteLogResult,
    NoteType,
    OperatingRange,
    Parameter,
    ReadingResult,
    ReadingStatus,
    Shift,
    ShiftNote,
    ShiftReportResult,
    StatusQueryResult,
    WeeklySummaryResult,
)
from handover.data.ranges import EquipmentRangeRegistry
from handover.data.store import NoteStore, ReadingStore
from handover.reports.assembler import (
    build_handover_summary,
    build_previous_shift_report,
    build_reading_message,
    build_reading_rejection,
    build_status_query,
    build_weekly_summary,
)
from handover.reports.formatting import format_time
from handover.reports.safety import format_safety_reminder

logger = logging.getLogger(__name__)


def _generate_id(prefix: str, now: datetime) -> str:
    return f"{prefix}_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


class ShiftHandoverService:
    def __init__(
        self,
        note_store: NoteStore | None = None,
        reading_store: ReadingStore | None = None,
        registry: EquipmentRangeRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.notes = note_store if note_store is not None else NoteStore()
        self.readings = reading_store if reading_store is not None else ReadingStore()
        self.ranges = registry if registry is not None else EquipmentRangeRegistry()
        self._clock = clock or facility_now

    def now(self) -> datetime:
        return self._clock()

    # ── Notes ─────────────────────────────────────────────────────────────────

    def log_note(
        self,
        text: str,
        unit: str | None = None,
        note_type: NoteType | str | None = None,
    ) -> NoteLogResult:
        now = self.now()
        result = classify(text, unit=unit, note_type=note_type)
        shift = current_shift(now)
        note = ShiftNote(
            id=_generate_id("note", now),
            timestamp=now,
            shift=shift,
            unit=result.unit,
            note=text,
            type=result.type,
            priority=result.priority,
        )
        self.notes.append(note)
        handover_at = next_handover_time(now)
        logger.info(
            "Logged %s note %s for unit %s (%s priority, %s)",
            note.type.value, note.id, note.unit, note.priority.value, shift.value,
        )

        message = (
            f"✓ Note logged for {shift_name(shift)} (Unit {note.unit})\n"
            f"Type: {note.type.value.capitalize()}\n"
            f"Priority: {note.priority.value.capitalize()}\n"
            f"Time: {format_time(now)}\n"
            f"Will be included in next handover at {format_time(handover_at)}"
        )
        return NoteLogResult(
            id=note.id,
            shift=shift,
            unit=note.unit,
            type=note.type,
            priority=note.priority,
            timestamp=now,
            next_handover=handover_at,
            message=message,
        )

    def query_status(
        self,
        unit: str | None = None,
        note_type: NoteType | str | None = None,
        show_all: bool = False,
    ) -> StatusQueryResult:
        """Notes of the current shift (or every note with `show_all`), grouped by type."""
        current = current_shift(self.now())
        type_filter = None if note_type in (None, "", "all") else NoteType(note_type)
        notes = self.notes.query(
            shift=None if show_all else current,
            unit=unit,
            note_type=type_filter,
        )
        return build_status_query(notes, current, unit_filter=unit, type_filter=type_filter)

    def get_previous_shift_report(self, shift: Shift | str | None = None) -> ShiftReportResult:
        now = self.now()
        current = current_shift(now)
        target = Shift(shift) if shift else previous_shift(current)
        notes = self.notes.query(shift=target)
        return build_previous_shift_report(notes, target, current, now)

    def generate_handover_summary(self, shift: Shift | str | None = None) -> HandoverSummaryResult:
        now = self.now()
        outgoing = Shift(shift) if shift else current_shift(now)
        notes = self.notes.query(shift=outgoing)
        result = build_handover_summary(notes, outgoing, now)
        logger.info(
            "Handover summary %s -> %s: %d notes, %d pending",
            result.from_shift.value, result.to_shift.value, result.total_notes, result.unresolved_count,
        )
        return result

    def generate_weekly_summary(self, days: int = settings.WEEKLY_WINDOW_DAYS) -> WeeklySummaryResult:
        now = self.now()
        start = now - timedelta(days=days)
        notes = self.notes.query(since=start)
        abnormal = self.readings.abnormal(since=start)
        return build_weekly_summary(notes, abnormal, start, now, days)

    def safety_reminder(self) -> str:
        return format_safety_reminder(self.now())

    # ── Equipment readings ────────────────────────────────────────────────────

    def record_equipment_reading(
        self,
        equipment_id: str,
        equipment_type: EquipmentType | str,
        unit: str,
        parameter: Parameter | str,
        value: float,
        uom: str | None = None,
        normal_min: float | None = None,
        normal_max: float | None = None,
        operator: str | None = None,
    ) -> ReadingResult:
        """
        Record one equipment reading.

        The reading keeps a snapshot of the range it was judged against. When
        both `normal_min` and `normal_max` are given they become the stored
        range for this equipment parameter, used by later readings that omit
        them.

        Bounds that do not fit inside the critical band reject the reading:
        the result has success=False and nothing is stored.

        Raises:
            ValueError: unknown equipment type or parameter
        """
        now = self.now()
        equipment_type = EquipmentType(equipment_type)
        parameter = Parameter(parameter)

        try:
            operating_range = self.ranges.resolve(
                equipment_id, equipment_type, parameter,
                explicit_min=normal_min, explicit_max=normal_max, uom=uom,
            )
        except ValidationError:
            current = self.ranges.resolve_range(equipment_id, equipment_type, parameter)
            logger.warning(
                "Rejected reading %s %s=%s: bounds %s-%s outside critical %s-%s",
                equipment_id, parameter.value, value, normal_min, normal_max,
                current.critical_min, current.critical_max,
            )
            return ReadingResult(
                success=False,
                message=build_reading_rejection(
                    equipment_id, parameter, normal_min, normal_max, current, uom
                ),
            )

        evaluation = evaluate(value, operating_range)

        reading = EquipmentReading(
            id=_generate_id("reading", now),
            timestamp=now,
            shift=current_shift(now),
            equipment_id=equipment_id,
            equipment_type=equipment_type,
            unit=unit,
            parameter=parameter,
            value=value,
            uom=uom or operating_range.uom,
            normal_min=operating_range.min,
            normal_max=operating_range.max,
            critical_min=operating_range.critical_min,
            critical_max=operating_range.critical_max,
            status=evaluation.status,
            deviation=evaluation.deviation,
            operator=operator,
        )
        self.readings.append(reading)

        history = self.readings.recent(equipment_id, parameter, limit=settings.TREND_HISTORY_SIZE)
        trend = analyze_trend(history)
        recommendation = recommend(evaluation.status, evaluation.deviation)

        log = logger.warning if evaluation.status != ReadingStatus.NORMAL else logger.info
        log(
            "Reading %s %s=%s %s -> %s (deviation %s%%, trend %s)",
            equipment_id, parameter.value, value, reading.uom,
            evaluation.status.value, evaluation.deviation, trend.direction.value,
        )

        return ReadingResult(
            id=reading.id,
            status=reading.status,
            deviation=reading.deviation,
            message=build_reading_message(reading, recommendation, trend),
            recommendation=recommendation,
            trend_analysis=trend.text,
            trend=trend,
            reading=reading,
        )

    def equipment_history(
        self,
        equipment_id: str,
        limit: int = settings.EQUIPMENT_HISTORY_LIMIT,
    ) -> list[EquipmentReading]:
        """Most recent readings for one equipment across all parameters."""
        return self.readings.recent(equipment_id, limit=limit)

    def abnormal_readings(self) -> list[EquipmentReading]:
        return self.readings.abnormal()

    def custom_ranges(self) -> dict[tuple[str, str], OperatingRange]:
        return self.ranges.custom_ranges()
