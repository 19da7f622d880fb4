"""
config/equipment.py
───────────────────
Default operating ranges per equipment type and parameter.

Each entry defines two nested bands:
  normal   [min, max]                    → status "normal"
  critical [critical_min, critical_max]  → outside it, status "critical"
Values between the two bands report "warning".

Only the parameters that matter for an equipment type are listed. Any other
(type, parameter) pair resolves to FALLBACK_RANGE.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class DefaultRange:
    min: float
    max: float
    critical_min: float
    critical_max: float
    uom: str


# ── Type defaults, keyed by (equipment_type, parameter) ──────────────────────
DEFAULT_RANGES: dict[tuple[str, str], DefaultRange] = {
    # Pumps
    ("pump", "pressure"): DefaultRange(50, 150, 30, 180, "PSI"),
    ("pump", "flow_rate"): DefaultRange(100, 500, 50, 600, "GPM"),
    ("pump", "temperature"): DefaultRange(20, 80, 10, 100, "°C"),
    ("pump", "vibration"): DefaultRange(0, 5, 0, 10, "mm/s"),
    ("pump", "current"): DefaultRange(10, 50, 5, 60, "A"),
    # Compressors
    ("compressor", "pressure"): DefaultRange(100, 300, 80, 350, "PSI"),
    ("compressor", "temperature"): DefaultRange(40, 120, 20, 150, "°C"),
    ("compressor", "vibration"): DefaultRange(0, 7, 0, 12, "mm/s"),
    ("compressor", "rpm"): DefaultRange(1000, 3000, 800, 3500, "RPM"),
    # Heaters
    ("heater", "temperature"): DefaultRange(200, 500, 150, 600, "°C"),
    ("heater", "pressure"): DefaultRange(50, 200, 30, 250, "PSI"),
    ("heater", "flow_rate"): DefaultRange(50, 300, 30, 400, "GPM"),
    # Finfans (air coolers)
    ("finfan", "temperature"): DefaultRange(30, 80, 20, 100, "°C"),
    ("finfan", "pressure"): DefaultRange(20, 100, 10, 120, "PSI"),
    ("finfan", "rpm"): DefaultRange(500, 1500, 400, 1800, "RPM"),
    # Reactors
    ("reactor", "pressure"): DefaultRange(100, 500, 80, 600, "PSI"),
    ("reactor", "temperature"): DefaultRange(150, 400, 100, 500, "°C"),
    ("reactor", "level"): DefaultRange(30, 90, 10, 95, "%"),
    # Towers
    ("tower", "pressure"): DefaultRange(20, 150, 10, 180, "PSI"),
    ("tower", "temperature"): DefaultRange(80, 250, 50, 300, "°C"),
    ("tower", "level"): DefaultRange(40, 85, 20, 95, "%"),
    # Exchangers
    ("exchanger", "temperature"): DefaultRange(40, 150, 20, 180, "°C"),
    ("exchanger", "pressure"): DefaultRange(30, 120, 20, 150, "PSI"),
    ("exchanger", "flow_rate"): DefaultRange(100, 400, 50, 500, "GPM"),
}

# ── Generic band for unlisted combinations ───────────────────────────────────
FALLBACK_RANGE = DefaultRange(0, 100, 0, 150, "units")

# Deviation (% of band width from its midpoint) above which a normal reading
# still gets a "keep monitoring" notice
DEVIATION_NOTICE_PCT = 50.0
