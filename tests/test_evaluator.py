import pytest

from apitester.evaluator import check_body, check_status, evaluate, strip_whitespace
from apitester.models import CheckResult, ExecutionResult

TRANSPORT_FAILURE = ExecutionResult(transport_error="Request timed out", error_kind="TimeoutError")


def received(status=200, body=""):
    return ExecutionResult(actual_status=status, actual_body=body)


def test_strip_whitespace_removes_everything():
    assert strip_whitespace(' { "a" :\t1 }\n') == '{"a":1}'
    assert strip_whitespace('"two words"') == '"twowords"'


class TestStatusCheck:
    def test_exact_match(self):
        assert check_status("200", received(200)) is CheckResult.PASS

    def test_mismatch(self):
        assert check_status("404", received(200)) is CheckResult.FAIL

    @pytest.mark.parametrize("expected", ["OK", "200 ", " 200", "2xx"])
    def test_no_coercion(self, expected):
        assert check_status(expected, received(200)) is CheckResult.FAIL

    def test_unset_expectation_fails(self):
        assert check_status("", received(200)) is CheckResult.FAIL

    def test_transport_failure(self):
        assert check_status("200", TRANSPORT_FAILURE) is CheckResult.FAIL


class TestBodyCheck:
    def test_not_applicable_when_unset(self):
        assert check_body("", received(body="anything at all")) is CheckResult.NOT_APPLICABLE

    def test_whitespace_insensitive_match(self):
        assert check_body('{"a": 1}', received(body='{"a":1}\n')) is CheckResult.PASS

    def test_mismatch(self):
        assert check_body('{"a": 1}', received(body='{"a": 2}')) is CheckResult.FAIL

    def test_transport_failure_is_never_not_applicable(self):
        assert check_body("", TRANSPORT_FAILURE) is CheckResult.FAIL


class TestEvaluate:
    def test_status_only_case_passes(self, case_factory):
        """A GET with only a status expectation passes on any body."""
        case = case_factory(url="http://localhost:3000/users/1", expected_status="200")
        verdict = evaluate(case, received(200, "Alice"))

        assert verdict.status_result is CheckResult.PASS
        assert verdict.body_result is CheckResult.NOT_APPLICABLE
        assert verdict.overall is CheckResult.PASS

    def test_body_with_extra_whitespace_passes(self, case_factory):
        case = case_factory(expected_status="200", expected_body='{"ok":true}')
        verdict = evaluate(case, received(200, '{ "ok": true }'))
        assert verdict.overall is CheckResult.PASS

    def test_wrong_status_fails(self, case_factory):
        case = case_factory(expected_status="404")
        verdict = evaluate(case, received(200))

        assert verdict.status_result is CheckResult.FAIL
        assert verdict.overall is CheckResult.FAIL

    def test_right_status_wrong_body_fails(self, case_factory):
        case = case_factory(expected_status="200", expected_body="Bob")
        verdict = evaluate(case, received(200, "Alice"))

        assert verdict.status_result is CheckResult.PASS
        assert verdict.body_result is CheckResult.FAIL
        assert not verdict.passed

    def test_transport_failure_fails_both(self, case_factory):
        case = case_factory(expected_status="200")
        verdict = evaluate(case, TRANSPORT_FAILURE)

        assert verdict.status_result is CheckResult.FAIL
        assert verdict.body_result is CheckResult.FAIL
        assert verdict.overall is CheckResult.FAIL
