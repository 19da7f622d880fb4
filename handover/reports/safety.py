"""
handover/reports/safety.py
──────────────────────────
Daily safety reminder, rotating through a fixed set of topics by day of year.
"""
from __future__ import annotations

from datetime import date, datetime

SAFETY_REMINDERS: list[dict[str, str]] = [
    {
        "title": "Personal Protective Equipment (PPE)",
        "message": (
            "Remember to wear all required PPE including:\n"
            "✓ Hard hat\n"
            "✓ Safety glasses\n"
            "✓ Steel-toed boots\n"
            "✓ Heat-resistant gloves when working near hot equipment\n\n"
            "Safety is everyone's responsibility. Report any PPE damage immediately."
        ),
    },
    {
        "title": "Emergency Procedures",
        "message": (
            "Know your emergency response plan:\n"
            "✓ Location of emergency exits and assembly points\n"
            "✓ Fire extinguisher locations and operation\n"
            "✓ Emergency shutdown procedures\n"
            "✓ Contact numbers for emergency response team\n\n"
            "Review emergency procedures regularly. If you see something, say something."
        ),
    },
    {
        "title": "Hazard Communication",
        "message": (
            "Stay informed about workplace hazards:\n"
            "✓ Read and understand SDS (Safety Data Sheets)\n"
            "✓ Check hazard labels before handling materials\n"
            "✓ Report any spills or leaks immediately\n"
            "✓ Use proper storage and handling procedures\n\n"
            "Never take shortcuts with hazardous materials."
        ),
    },
    {
        "title": "Equipment Safety",
        "message": (
            "Maintain equipment safety standards:\n"
            "✓ Perform pre-operation inspections\n"
            "✓ Never bypass safety guards or interlocks\n"
            "✓ Report any equipment malfunctions immediately\n"
            "✓ Follow lockout/tagout procedures\n\n"
            "Properly maintained equipment keeps everyone safe."
        ),
    },
    {
        "title": "Situational Awareness",
        "message": (
            "Stay alert and aware:\n"
            "✓ Watch for changing conditions\n"
            "✓ Communicate hazards to your team\n"
            "✓ Don't rush - take time to do it safely\n"
            "✓ Stay focused and avoid distractions\n\n"
            "Your awareness protects you and your coworkers."
        ),
    },
]


def reminder_for(day: date | datetime) -> dict[str, str]:
    index = day.timetuple().tm_yday % len(SAFETY_REMINDERS)
    return SAFETY_REMINDERS[index]


def format_safety_reminder(day: date | datetime) -> str:
    reminder = reminder_for(day)
    return (
        "🛡️ DAILY SAFETY REMINDER\n\n"
        f"Today's Focus: {reminder['title']}\n\n"
        f"{reminder['message']}"
    )
