"""
handover/data/models.py
───────────────────────
Pydantic v2 data models for shift notes, equipment readings, operating ranges
and the results returned by the handover service.

Notes and readings are frozen: once created their content never changes.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Shift(str, Enum):
    DAY = "day"
    AFTERNOON = "afternoon"
    NIGHT = "night"


class NoteType(str, Enum):
    MAINTENANCE = "maintenance"
    ALERT = "alert"
    STATUS = "status"
    GENERAL = "general"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EquipmentType(str, Enum):
    PUMP = "pump"
    FINFAN = "finfan"
    HEATER = "heater"
    COMPRESSOR = "compressor"
    REACTOR = "reactor"
    TOWER = "tower"
    EXCHANGER = "exchanger"
    VALVE = "valve"


class Parameter(str, Enum):
    PRESSURE = "pressure"
    TEMPERATURE = "temperature"
    FLOW_RATE = "flow_rate"
    VIBRATION = "vibration"
    RPM = "rpm"
    CURRENT = "current"
    VOLTAGE = "voltage"
    LEVEL = "level"


class ReadingStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(str, Enum):
    STABLE = "stable"
    INCREASING = "increasing"
    DECREASING = "decreasing"
    INDETERMINATE = "indeterminate"
    INSUFFICIENT_DATA = "insufficient_data"


# ── Entities ──────────────────────────────────────────────────────────────────


class ShiftNote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    shift: Shift
    unit: str
    note: str
    type: NoteType
    priority: Priority
    resolved: bool = False


class OperatingRange(BaseModel):
    """Normal and critical bands for one equipment parameter."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    critical_min: float
    critical_max: float
    uom: str

    @model_validator(mode="after")
    def _check_nesting(self) -> OperatingRange:
        if not (self.critical_min <= self.min <= self.max <= self.critical_max):
            raise ValueError(
                "range must satisfy critical_min <= min <= max <= critical_max, got "
                f"{self.critical_min} / {self.min} / {self.max} / {self.critical_max}"
            )
        return self


class EquipmentReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    shift: Shift
    equipment_id: str
    equipment_type: EquipmentType
    unit: str
    parameter: Parameter
    value: float
    uom: str
    # Range snapshot taken when the reading was recorded
    normal_min: float
    normal_max: float
    critical_min: float
    critical_max: float
    status: ReadingStatus
    deviation: float = Field(ge=0.0)
    operator: str | None = None


# ── Results ───────────────────────────────────────────────────────────────────


class NoteLogResult(BaseModel):
    success: bool = True
    id: str
    shift: Shift
    unit: str
    type: NoteType
    priority: Priority
    timestamp: datetime
    next_handover: datetime
    message: str


class NoteCounts(BaseModel):
    total_notes: int = 0
    maintenance_count: int = 0
    alert_count: int = 0
    status_count: int = 0
    general_count: int = 0


class StatusQueryResult(NoteCounts):
    shift: Shift
    time_range: str
    formatted_summary: str


class ShiftReportResult(NoteCounts):
    shift: Shift
    time_range: str
    unresolved_count: int = 0
    formatted_report: str


class HandoverSummaryResult(NoteCounts):
    from_shift: Shift
    to_shift: Shift
    unresolved_count: int = 0
    summary: str


class WeeklySummaryResult(NoteCounts):
    window_start: datetime
    window_end: datetime
    unresolved_count: int = 0
    resolution_rate: float | None = None
    abnormal_reading_count: int = 0
    recurring_units: list[str] = Field(default_factory=list)
    summary: str


class TrendAnalysis(BaseModel):
    direction: TrendDirection
    sample_size: int
    recent_average: float | None = None
    previous_average: float | None = None
    trend_pct: float | None = None
    warning_count: int = 0
    critical_count: int = 0
    maintenance_recommendation: str | None = None
    text: str


class ReadingResult(BaseModel):
    """Outcome of recording a reading; a rejected reading carries only the message."""

    success: bool = True
    id: str | None = None
    status: ReadingStatus | None = None
    deviation: float | None = None
    message: str
    recommendation: str | None = None
    trend_analysis: str | None = None
    trend: TrendAnalysis | None = None
    reading: EquipmentReading | None = None
