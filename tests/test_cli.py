import json

from click.testing import CliRunner

from mortgage_sim import main

LOAN_ARGS = ["-p", "1m", "-r", "4.2", "-t", "360", "-s", "2025-01"]


def _run(*args):
    return CliRunner().invoke(main.cli, list(args))


def test_parse_amount_suffixes():
    assert main.parse_amount("500k") == 500_000.0
    assert main.parse_amount("1.5m") == 1_500_000.0
    assert main.parse_amount("1,000") == 1_000.0


def test_schedule_prints_summary_and_truncates():
    result = _run("schedule", *LOAN_ARGS)
    assert result.exit_code == 0, result.output
    assert "Summary" in result.output
    assert "showing first 120 rows" in result.output
    assert "4890.17" in result.output


def test_schedule_with_lump_sum():
    result = _run("summary", *LOAN_ARGS, "--lump-sum", "100k", "--lump-sum-period", "12")
    assert result.exit_code == 0, result.output
    assert "Periods            : 299" in result.output


def test_schedule_exports_json(tmp_path):
    path = tmp_path / "schedule.json"
    result = _run("schedule", *LOAN_ARGS, "--rate-change", "2026-01:3.5", "--output", str(path))
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text())
    assert data["summary"]["total_periods"] == 360
    assert data["schedule"][12]["rate"] == 3.5


def test_schedule_exports_csv(tmp_path):
    path = tmp_path / "schedule.csv"
    result = _run("schedule", *LOAN_ARGS, "--method", "level-principal", "--output", str(path))
    assert result.exit_code == 0, result.output
    lines = path.read_text().splitlines()
    assert lines[0] == "Period,Date,Rate,Payment,Principal,Interest,Extra,Balance"
    assert len(lines) == 361


def test_compare_recommends_shorten_term():
    result = _run("compare", *LOAN_ARGS, "--lump-sum", "100k", "--lump-sum-period", "12", "--monthly-extra", "2000")
    assert result.exit_code == 0, result.output
    assert "Recommended        : Shorten term" in result.output


def test_compare_requires_extras():
    result = _run("compare", *LOAN_ARGS)
    assert result.exit_code == 2
    assert "--lump-sum" in result.output


def test_invalid_term_is_reported():
    result = _run("schedule", "-p", "1m", "-r", "4.2", "-t", "0", "-s", "2025-01")
    assert result.exit_code == 2
    assert "Invalid term" in result.output


def test_oversized_term_is_reported():
    result = _run("summary", "-p", "1m", "-r", "4.2", "-t", "1000000000", "-s", "2025-01")
    assert result.exit_code == 2
    assert "must be at most 1200 periods" in result.output


def test_invalid_amount_is_reported():
    result = _run("schedule", "-p", "lots", "-r", "4.2", "-t", "360", "-s", "2025-01")
    assert result.exit_code == 2
    assert "Invalid amount" in result.output


def test_advice_prints_generated_text(monkeypatch):
    seen = {}

    def fake_advice(comparison):
        seen["strategy"] = comparison.strategy
        return "Keep an emergency fund."

    monkeypatch.setattr(main, "get_mortgage_advice", fake_advice)
    result = _run("advice", *LOAN_ARGS, "--lump-sum", "100k", "--strategy", "reduce-payment")
    assert result.exit_code == 0, result.output
    assert "Keep an emergency fund." in result.output
    assert seen["strategy"].value == "reduce-payment"
