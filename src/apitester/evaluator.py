"""
Comparison of actual outcomes against test-case expectations.
"""

import re

from .models import CheckResult, ExecutionResult, TestCase, Verdict

_WHITESPACE = re.compile(r"\s+")


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character, including those inside string values."""
    return _WHITESPACE.sub("", text)


def check_status(expected_status: str, result: ExecutionResult) -> CheckResult:
    """Exact string comparison; an unset expectation never matches."""
    if not result.ok or result.actual_status is None:
        return CheckResult.FAIL
    if str(result.actual_status) == expected_status:
        return CheckResult.PASS
    return CheckResult.FAIL


def check_body(expected_body: str, result: ExecutionResult) -> CheckResult:
    if not result.ok:
        return CheckResult.FAIL
    if not expected_body:
        return CheckResult.NOT_APPLICABLE
    if strip_whitespace(result.actual_body) == strip_whitespace(expected_body):
        return CheckResult.PASS
    return CheckResult.FAIL


def evaluate(case: TestCase, result: ExecutionResult) -> Verdict:
    """
    Judge one executed case.

    A transport failure fails both dimensions. Otherwise the status must match
    exactly and, when an expected body is given, the bodies must be equal once
    all whitespace is removed from both.
    """
    return Verdict(
        status_result=check_status(case.expected_status, result),
        body_result=check_body(case.expected_body, result),
    )
