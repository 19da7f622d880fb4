"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the shift handover test suite.
"""
import os
from datetime import datetime, timedelta

import pytest

# In-process storage and naive wall-clock datetimes for tests
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("FACILITY_TZ", "")
os.environ.setdefault("SIMULATION_SEED", "42")


class FakeClock:
    """Settable clock injected into the service."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def now() -> datetime:
    # Saturday, June 1 2024, 9:00 AM → day shift
    return datetime(2024, 6, 1, 9, 0, 0)


@pytest.fixture
def clock(now) -> FakeClock:
    return FakeClock(now)


@pytest.fixture
def service(clock):
    from handover.service import ShiftHandoverService
    return ShiftHandoverService(clock=clock)


@pytest.fixture
def make_note(now):
    """Factory for ShiftNote objects with sensible defaults."""
    from handover.data.models import NoteType, Priority, Shift, ShiftNote

    counter = iter(range(1_000_000))

    def _make(
        note: str = "Routine round completed",
        unit: str = "5",
        type: NoteType = NoteType.GENERAL,
        priority: Priority = Priority.LOW,
        shift: Shift = Shift.DAY,
        timestamp: datetime | None = None,
        resolved: bool = False,
    ) -> ShiftNote:
        return ShiftNote(
            id=f"note_test_{next(counter)}",
            timestamp=timestamp or now,
            shift=shift,
            unit=unit,
            note=note,
            type=type,
            priority=priority,
            resolved=resolved,
        )

    return _make


@pytest.fixture
def make_reading(now):
    """Factory for EquipmentReading objects on a pump pressure series."""
    from handover.analytics.evaluator import evaluate
    from handover.data.models import EquipmentReading, EquipmentType, OperatingRange, Parameter, Shift

    counter = iter(range(1_000_000))
    band = OperatingRange(min=50, max=150, critical_min=30, critical_max=180, uom="PSI")

    def _make(
        value: float,
        equipment_id: str = "P-101",
        parameter: Parameter = Parameter.PRESSURE,
        timestamp: datetime | None = None,
        operating_range: OperatingRange = band,
    ) -> EquipmentReading:
        result = evaluate(value, operating_range)
        return EquipmentReading(
            id=f"reading_test_{next(counter)}",
            timestamp=timestamp or now,
            shift=Shift.DAY,
            equipment_id=equipment_id,
            equipment_type=EquipmentType.PUMP,
            unit="5",
            parameter=parameter,
            value=value,
            uom=operating_range.uom,
            normal_min=operating_range.min,
            normal_max=operating_range.max,
            critical_min=operating_range.critical_min,
            critical_max=operating_range.critical_max,
            status=result.status,
            deviation=result.deviation,
        )

    return _make


@pytest.fixture
def history(make_reading):
    """Build a newest-first history from a list of values (first = newest)."""

    def _history(values: list[float]):
        return [make_reading(v) for v in values]

    return _history
