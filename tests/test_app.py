"""
tests/test_app.py
─────────────────
Tests for the command-line entry point.
"""
import pytest

import app
from config.settings import settings
from handover.service import ShiftHandoverService


def run_cli(argv, service):
    return app.run(app.build_parser().parse_args(argv), service)


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            app.build_parser().parse_args([])

    def test_rejects_unknown_parameter(self):
        with pytest.raises(SystemExit):
            app.build_parser().parse_args(["reading", "P-101", "pump", "5", "humidity", "10"])

    def test_rejects_unknown_shift(self):
        with pytest.raises(SystemExit):
            app.build_parser().parse_args(["handover", "--shift", "graveyard"])


class TestRun:
    def test_log_then_status(self, service):
        out = run_cli(["log", "Unit 5 pump maintenance started"], service)
        assert out.startswith("✓ Note logged for Day Shift (Unit 5)")
        status = run_cli(["status", "--unit", "5"], service)
        assert "Unit 5 pump maintenance started" in status

    def test_status_type_all(self, service):
        run_cli(["log", "Pressure spike on unit 3"], service)
        assert "Total Notes: 1" in run_cli(["status", "--type", "all"], service)

    def test_handover(self, service):
        assert "QUIET SHIFT" in run_cli(["handover"], service)

    def test_previous(self, service):
        assert "Night Shift" in run_cli(["previous"], service)

    def test_weekly(self, service):
        assert run_cli(["weekly", "--days", "7"], service).startswith("📅 WEEKLY MAINTENANCE SUMMARY")

    def test_safety(self, service):
        assert run_cli(["safety"], service).startswith("🛡️ DAILY SAFETY REMINDER")

    def test_reading(self, service):
        out = run_cli(
            ["reading", "P-101", "pump", "5", "pressure", "125", "--operator", "J. Ortiz"], service
        )
        assert "🚦 STATUS: NORMAL" in out
        assert "👤 OPERATOR: J. Ortiz" in out

    def test_reading_with_bounds(self, service):
        run_cli(["reading", "P-101", "pump", "5", "pressure", "100", "--normal-min", "60", "--normal-max", "140"], service)
        out = run_cli(["reading", "P-101", "pump", "5", "pressure", "145"], service)
        assert "🚦 STATUS: WARNING" in out

    def test_reading_with_conflicting_bounds(self, service):
        out = run_cli(["reading", "P-101", "pump", "5", "pressure", "25", "--normal-min", "20", "--normal-max", "140"], service)
        assert out.startswith("✗ Reading Not Recorded - P-101 PRESSURE")
        assert len(service.readings) == 0

    def test_seed_demo(self, clock):
        service = ShiftHandoverService(clock=clock)
        out = run_cli(["seed-demo", "--hours", "6"], service)
        assert out == "Seeded 30 demo records."
        assert len(service.readings) == 24


class TestMain:
    def test_main_prints_and_returns_zero(self, capsys):
        assert app.main(["safety"]) == 0
        assert "DAILY SAFETY REMINDER" in capsys.readouterr().out

    def test_sqlite_persists_between_runs(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(settings, "DATABASE_URL", str(tmp_path / "shift.db"))
        app.main(["log", "Unit 5 pump maintenance started"])
        capsys.readouterr()
        app.main(["status", "--all"])
        assert "Unit 5 pump maintenance started" in capsys.readouterr().out
