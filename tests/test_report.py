from datetime import datetime

from apitester.models import CaseRecord, CheckResult, ExecutionResult, SuiteReport, Verdict
from apitester.report import default_results_filename, render_report, save_report


def build_report(case_factory):
    report = SuiteReport(
        started_at=datetime(2024, 5, 1, 9, 30, 0),
        hostname="build-host",
        user="ci",
    )
    report.add(
        CaseRecord(
            case=case_factory(desc="List users", expected_status="200"),
            result=ExecutionResult(actual_status=200, actual_body="[]"),
            verdict=Verdict(
                status_result=CheckResult.PASS, body_result=CheckResult.NOT_APPLICABLE
            ),
        )
    )
    report.add(
        CaseRecord(
            case=case_factory(desc="Slow endpoint", expected_status="200", expected_body="{}"),
            result=ExecutionResult(transport_error="Request timed out", error_kind="TimeoutError"),
            verdict=Verdict(status_result=CheckResult.FAIL, body_result=CheckResult.FAIL),
        )
    )
    return report


def test_render_report_layout(case_factory):
    text = render_report(build_report(case_factory))

    assert text.splitlines() == [
        "API Test Suite Results",
        "Run at: 2024-05-01 09:30:00 on build-host as ci",
        "Total: 2   PASS: 1   FAIL: 1",
        "",
        "✅ [PASS] List users",
        "  Expected: Status=200, Body=",
        "  Received: Status=200, Body=[]",
        "",
        "❌ [FAIL] Slow endpoint",
        "  Expected: Status=200, Body={}",
        "  Received: Status=N/A, Body=",
        "  Error: Request timed out",
    ]


def test_render_report_is_deterministic(case_factory):
    report = build_report(case_factory)
    assert render_report(report) == render_report(report)


def test_render_empty_report():
    report = SuiteReport(started_at=datetime(2024, 1, 1), hostname="h", user="u")
    assert "Total: 0   PASS: 0   FAIL: 0" in render_report(report)


def test_save_report_matches_rendered_text(tmp_path, case_factory):
    report = build_report(case_factory)
    path = save_report(report, tmp_path / "out" / default_results_filename(report))

    assert path.name == "api_test_results_20240501_093000.txt"
    assert path.read_text(encoding="utf-8") == render_report(report) + "\n"
