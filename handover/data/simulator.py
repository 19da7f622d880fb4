"""
handover/data/simulator.py
──────────────────────────
Synthetic shift history for demos and local testing.

Generates:
  - Hourly equipment readings around each range's normal midpoint
  - An optional linear drift per series (a slowly fouling exchanger, a
    pump losing suction pressure, ...)
  - A handful of operator notes spread over the same period

Design:
  - Reproducible with SIMULATION_SEED for consistent demos
  - Readings go through ShiftHandoverService, so status, deviation and trend
    are computed exactly as for live input
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from config.settings import settings
from handover.data.models import EquipmentType, OperatingRange, Parameter
from handover.data.ranges import EquipmentRangeRegistry
from handover.data.store import NoteStore, ReadingStore
from handover.service import ShiftHandoverService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DemoSeries:
    equipment_id: str
    equipment_type: EquipmentType
    unit: str
    parameter: Parameter
    drift_pct: float   # total drift over the series, as % of the band width
    noise_pct: float = 4.0


DEMO_SERIES: list[DemoSeries] = [
    DemoSeries("P-101", EquipmentType.PUMP, "5", Parameter.PRESSURE, drift_pct=-45.0),
    DemoSeries("C-205", EquipmentType.COMPRESSOR, "3", Parameter.VIBRATION, drift_pct=70.0),
    DemoSeries("H-301", EquipmentType.HEATER, "2", Parameter.TEMPERATURE, drift_pct=0.0),
    DemoSeries("R-401", EquipmentType.REACTOR, "4", Parameter.LEVEL, drift_pct=10.0),
]

DEMO_NOTES: list[str] = [
    "Unit 5 pump P-101 maintenance started, ETA 4 hours",
    "Reactor 4 temperature stable at 320C, operating normal",
    "Pressure spike on unit 3 compressor discharge, monitoring",
    "Tower 2 inspection completed, no findings",
    "Emergency shutdown drill scheduled for unit 7",
    "Shift meeting held, all crews briefed",
]


class _ManualClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def simulate_series(
    operating_range: OperatingRange,
    samples: int,
    rng: np.random.Generator,
    drift_pct: float = 0.0,
    noise_pct: float = 4.0,
) -> list[float]:
    """
    Values around the normal-band midpoint with Gaussian noise and linear drift.

    Args:
        operating_range: Range whose normal band anchors the series
        samples: Number of values
        rng: Random generator for reproducible noise
        drift_pct: Total drift across the series, % of the normal band width
        noise_pct: Noise σ, % of the normal band width

    Returns:
        Values clipped to [0, 1.2 × critical_max], rounded to 2 decimals
    """
    width = operating_range.max - operating_range.min
    midpoint = (operating_range.min + operating_range.max) / 2.0
    drift = np.linspace(0.0, drift_pct / 100.0 * width, samples)
    noise = rng.normal(0.0, noise_pct / 100.0 * width, samples)
    values = np.clip(midpoint + drift + noise, 0.0, operating_range.critical_max * 1.2)
    return [round(float(v), 2) for v in values]


def seed_demo(
    note_store: NoteStore,
    reading_store: ReadingStore,
    registry: EquipmentRangeRegistry,
    end: datetime,
    hours: int = 24,
    seed: int = settings.SIMULATION_SEED,
) -> int:
    """
    Fill the stores with `hours` of hourly demo history ending at `end`.

    Returns:
        Number of records written (readings + notes)
    """
    rng = np.random.default_rng(seed)
    start = end - timedelta(hours=hours - 1)
    clock = _ManualClock(start)
    service = ShiftHandoverService(note_store, reading_store, registry, clock=clock)

    written = 0
    for series in DEMO_SERIES:
        band = registry.resolve_range(series.equipment_id, series.equipment_type, series.parameter)
        values = simulate_series(band, hours, rng, series.drift_pct, series.noise_pct)
        for hour, value in enumerate(values):
            clock.now = start + timedelta(hours=hour)
            service.record_equipment_reading(
                series.equipment_id,
                series.equipment_type,
                series.unit,
                series.parameter,
                value,
                operator="demo",
            )
            written += 1

    note_hours = np.sort(rng.choice(hours, size=min(len(DEMO_NOTES), hours), replace=False))
    for text, hour in zip(DEMO_NOTES, note_hours):
        clock.now = start + timedelta(hours=int(hour), minutes=int(rng.integers(0, 60)))
        service.log_note(text)
        written += 1

    logger.info("Seeded %d demo records over %d hours ending %s", written, hours, end.isoformat())
    return written
