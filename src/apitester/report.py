"""
Text rendering of suite reports.

Rendering is a pure function of the report, so the same text is printed by
the headless runner, shown in the pager and written to saved result files.
"""

from pathlib import Path
from typing import List, Union

from .models import CaseRecord, SuiteReport

PASS_MARK = "✅"
FAIL_MARK = "❌"


def render_case(record: CaseRecord) -> List[str]:
    case, result, verdict = record.case, record.result, record.verdict
    mark = PASS_MARK if verdict.passed else FAIL_MARK
    lines = [
        f"{mark} [{verdict.overall.value}] {case.description}",
        f"  Expected: Status={case.expected_status}, Body={case.expected_body}",
        f"  Received: Status={result.status_display}, Body={result.actual_body}",
    ]
    if not result.ok:
        lines.append(f"  Error: {result.transport_error}")
    return lines


def render_report(report: SuiteReport) -> str:
    """Render the full suite summary."""
    lines = [
        "API Test Suite Results",
        f"Run at: {report.started_at:%Y-%m-%d %H:%M:%S} on {report.hostname} as {report.user}",
        f"Total: {report.total}   PASS: {report.pass_count}   FAIL: {report.fail_count}",
        "",
    ]
    for record in report.records:
        lines.extend(render_case(record))
        lines.append("")
    return "\n".join(lines)


def default_results_filename(report: SuiteReport) -> str:
    return f"api_test_results_{report.started_at:%Y%m%d_%H%M%S}.txt"


def save_report(report: SuiteReport, path: Union[str, Path]) -> Path:
    """Write the rendered report to ``path``, replacing any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(report) + "\n", encoding="utf-8")
    return path
