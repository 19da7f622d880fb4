"""
app.py
──────
Refinery Shift Handover — command-line entry point.

Startup sequence:
  1. Configure logging from LOG_LEVEL
  2. Open the note / reading stores (in-memory, or SQLite at DATABASE_URL)
  3. Build the handover service on the facility clock
  4. Run one subcommand and print its formatted output

Examples:
  DATABASE_URL=shift.db python app.py log "Unit 5 pump maintenance started"
  DATABASE_URL=shift.db python app.py reading P-101 pump 5 pressure 125
  DATABASE_URL=shift.db python app.py handover
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from config.settings import settings
from handover.analytics.shift_clock import facility_now
from handover.data.models import EquipmentType, NoteType, Parameter, Shift
from handover.data.ranges import EquipmentRangeRegistry
from handover.data.simulator import seed_demo
from handover.data.store import open_stores
from handover.service import ShiftHandoverService

SHIFT_CHOICES = [s.value for s in Shift]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shift-handover",
        description="Log shift notes and equipment readings, and print handover reports.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    log_cmd = sub.add_parser("log", help="Log a free-text shift note")
    log_cmd.add_argument("text")
    log_cmd.add_argument("--unit", help="Unit number (extracted from the text if omitted)")
    log_cmd.add_argument("--type", dest="note_type", choices=[t.value for t in NoteType])

    status_cmd = sub.add_parser("status", help="Current shift status")
    status_cmd.add_argument("--unit", help='Unit filter, e.g. "5" or "Unit 5"')
    status_cmd.add_argument("--type", dest="note_type", choices=[t.value for t in NoteType] + ["all"])
    status_cmd.add_argument("--all", dest="show_all", action="store_true", help="Include every shift")

    previous_cmd = sub.add_parser("previous", help="Previous shift report")
    previous_cmd.add_argument("--shift", choices=SHIFT_CHOICES)

    handover_cmd = sub.add_parser("handover", help="Handover summary for the outgoing shift")
    handover_cmd.add_argument("--shift", choices=SHIFT_CHOICES)

    weekly_cmd = sub.add_parser("weekly", help="Weekly maintenance summary")
    weekly_cmd.add_argument("--days", type=int, default=settings.WEEKLY_WINDOW_DAYS)

    sub.add_parser("safety", help="Daily safety reminder")

    reading_cmd = sub.add_parser("reading", help="Record an equipment reading")
    reading_cmd.add_argument("equipment_id")
    reading_cmd.add_argument("equipment_type", choices=[t.value for t in EquipmentType])
    reading_cmd.add_argument("unit")
    reading_cmd.add_argument("parameter", choices=[p.value for p in Parameter])
    reading_cmd.add_argument("value", type=float)
    reading_cmd.add_argument("--uom")
    reading_cmd.add_argument("--normal-min", type=float)
    reading_cmd.add_argument("--normal-max", type=float)
    reading_cmd.add_argument("--operator")

    seed_cmd = sub.add_parser("seed-demo", help="Fill the store with simulated history")
    seed_cmd.add_argument("--hours", type=int, default=24)
    seed_cmd.add_argument("--seed", type=int, default=settings.SIMULATION_SEED)

    return parser


def run(args: argparse.Namespace, service: ShiftHandoverService) -> str:
    if args.command == "log":
        return service.log_note(args.text, unit=args.unit, note_type=args.note_type).message
    if args.command == "status":
        return service.query_status(args.unit, args.note_type, args.show_all).formatted_summary
    if args.command == "previous":
        return service.get_previous_shift_report(args.shift).formatted_report
    if args.command == "handover":
        return service.generate_handover_summary(args.shift).summary
    if args.command == "weekly":
        return service.generate_weekly_summary(args.days).summary
    if args.command == "safety":
        return service.safety_reminder()
    if args.command == "reading":
        return service.record_equipment_reading(
            args.equipment_id,
            args.equipment_type,
            args.unit,
            args.parameter,
            args.value,
            uom=args.uom,
            normal_min=args.normal_min,
            normal_max=args.normal_max,
            operator=args.operator,
        ).message
    if args.command == "seed-demo":
        written = seed_demo(
            service.notes, service.readings, service.ranges,
            end=service.now(), hours=args.hours, seed=args.seed,
        )
        return f"Seeded {written} demo records."
    raise ValueError(f"unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    note_store, reading_store = open_stores(settings.DATABASE_URL)
    service = ShiftHandoverService(
        note_store, reading_store, EquipmentRangeRegistry(), clock=facility_now
    )
    print(run(args, service))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
