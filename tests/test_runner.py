"""
Tests for suite execution.
"""

import httpx
import pytest

from apitester.builder import RequestBuilder
from apitester.executor import HttpExecutor
from apitester.models import CheckResult, Template
from apitester.runner import SuiteRunner, run_suite


@pytest.mark.asyncio
async def test_full_suite_in_declaration_order(mock_api, sample_template_data):
    template = Template.model_validate(sample_template_data)

    report = await run_suite(template.testcases, source="users.json")

    assert report.total == 3
    assert report.pass_count == 2
    assert report.fail_count == 1
    assert report.total == report.pass_count + report.fail_count
    assert [r.case.description for r in report.records] == [
        "List users",
        "Create user",
        "Missing user",
    ]
    assert [r.verdict.overall for r in report.records] == [
        CheckResult.PASS,
        CheckResult.PASS,
        CheckResult.FAIL,
    ]
    assert report.records[2].result.actual_status == 404
    assert report.source == "users.json"
    assert report.hostname


@pytest.mark.asyncio
async def test_failures_do_not_stop_the_run(mock_router, base_url, case_factory):
    mock_router.get(f"{base_url}/down").mock(side_effect=httpx.ConnectTimeout)
    up = mock_router.get(f"{base_url}/up").respond(status_code=200, text="ok")
    cases = [
        case_factory(desc="down", url=f"{base_url}/down"),
        case_factory(desc="wrong", url=f"{base_url}/up", expected_status="500"),
        case_factory(desc="up", url=f"{base_url}/up", expected_body="ok"),
    ]

    report = await run_suite(cases)

    assert up.call_count == 2
    assert [r.verdict.passed for r in report.records] == [False, False, True]
    assert report.records[0].result.error_kind == "TimeoutError"
    assert report.records[0].verdict.body_result is CheckResult.FAIL


@pytest.mark.asyncio
async def test_empty_suite_makes_no_calls(mock_router):
    report = await run_suite([])

    assert report.total == 0
    assert report.pass_count == 0
    assert report.fail_count == 0
    assert not mock_router.calls


@pytest.mark.asyncio
async def test_default_and_auth_headers_applied(mock_router, base_url, case_factory):
    route = mock_router.get(f"{base_url}/protected/bearer").respond(status_code=200)

    report = await run_suite(
        [case_factory(url=f"{base_url}/protected/bearer", headers="X-Case: 1")],
        default_headers=["X-Default: 1"],
        auth_header="Authorization: Bearer token1234",
    )

    assert report.pass_count == 1
    sent = route.calls.last.request
    assert sent.headers["x-default"] == "1"
    assert sent.headers["x-case"] == "1"
    assert sent.headers["authorization"] == "Bearer token1234"


@pytest.mark.asyncio
async def test_on_case_callback_sees_every_case(mock_api, base_url, case_factory):
    seen = []
    cases = [
        case_factory(desc="a", url=f"{base_url}/users"),
        case_factory(desc="b", url=f"{base_url}/users/42"),
    ]

    async with HttpExecutor() as executor:
        runner = SuiteRunner(
            executor,
            RequestBuilder(),
            on_case=lambda index, record: seen.append((index, record.case.description)),
        )
        report = await runner.run(cases)

    assert seen == [(0, "a"), (1, "b")]
    assert report.total == 2


@pytest.mark.asyncio
async def test_unencodable_header_fails_only_its_case(mock_api, base_url, case_factory):
    cases = [
        case_factory(desc="accented", url=f"{base_url}/users", headers="X-Name: café"),
        case_factory(desc="plain", url=f"{base_url}/users"),
    ]

    report = await run_suite(cases)

    assert report.total == 2
    assert [r.verdict.passed for r in report.records] == [False, True]
    first = report.records[0]
    assert first.result.actual_status is None
    assert first.verdict.status_result is CheckResult.FAIL
    assert first.verdict.body_result is CheckResult.FAIL
    assert "Invalid request" in first.result.transport_error
