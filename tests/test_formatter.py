from mortgage_sim.engine import compare_strategies, simulate, summarize
from mortgage_sim.formatter import print_comparison, print_schedule, print_summary


def test_print_summary(make_loan, capsys):
    loan = make_loan()
    print_summary(summarize(simulate(loan), loan))
    out = capsys.readouterr().out
    assert "Total interest     : 760461.83" in out
    assert "Original end date  : 2054-12-01" in out
    assert "Extra payments" not in out


def test_print_schedule(make_loan, capsys):
    print_schedule(simulate(make_loan()).schedule[:2])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split("\t")[0] == "Period"
    assert lines[1].split("\t") == ["1", "2025-01-01", "4.20%", "4890.17", "1390.17", "3500.00", "0.00", "998609.83"]
    assert len(lines) == 3


def test_print_comparison(make_loan, make_plan, capsys):
    print_comparison(compare_strategies(make_loan(), make_plan()))
    out = capsys.readouterr().out
    assert "Shorten term" in out and "Reduce payment" in out
    assert "Extra interest saved over the other strategy: 129567.56" in out
