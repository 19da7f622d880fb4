"""
config/shifts.py
────────────────
Shift calendar and display configuration.

Three fixed, contiguous 8-hour shifts on the facility wall clock:
  day        06:00 → 14:00
  afternoon  14:00 → 22:00
  night      22:00 → 06:00 (wraps midnight)
"""

# Start hour of each shift, in rotation order
SHIFT_START_HOURS: dict[str, int] = {
    "day": 6,
    "afternoon": 14,
    "night": 22,
}

SHIFT_ROTATION: list[str] = ["day", "afternoon", "night"]

SHIFT_TIME_RANGES: dict[str, str] = {
    "day": "6:00 AM - 2:00 PM",
    "afternoon": "2:00 PM - 10:00 PM",
    "night": "10:00 PM - 6:00 AM",
}

SHIFT_EMOJIS: dict[str, str] = {
    "day": "☀️",
    "afternoon": "🌆",
    "night": "🌙",
}
