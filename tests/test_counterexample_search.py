"""Smoke tests for the differential counterexample search."""

from __future__ import annotations

from validation.counterexample_search import (
    Counterexample,
    SearchReport,
    edge_values,
    run_search,
)


class TestSearch:

    def test_finds_no_counterexamples(self):
        report = run_search(samples=4, seed=0)
        assert report.passed, report.summary()
        assert report.checks_run > 0

    def test_edge_values_are_symmetric(self):
        values = edge_values()
        assert 0 in values
        assert all(-v in values for v in values)


class TestReport:

    def test_summary_lists_counterexamples(self):
        report = SearchReport()
        report.counterexamples.append(Counterexample(
            category="postcondition_violation",
            operation="add",
            inputs=(1, 2),
            expected="3",
            actual="result=4",
            description="Postcondition 'result_correct' violated",
        ))
        assert not report.passed
        assert "add" in report.summary()
        assert "Counterexamples found: 1" in report.summary()

    def test_empty_report_passes(self):
        assert SearchReport().passed
        assert "all checks passed" in SearchReport().summary()
