"""
Suite execution for apitester.

``SuiteRunner`` is a straight fold over the case list: every case is built,
executed and evaluated in declaration order and appended to a single
``SuiteReport``. A failing case never stops the run and nothing is retried.
"""

import getpass
import logging
import socket
from datetime import datetime
from typing import Callable, Optional, Sequence

import httpx

from .builder import RequestBuilder
from .evaluator import evaluate
from .executor import DEFAULT_TIMEOUT, HttpExecutor
from .models import CaseRecord, SuiteReport, TestCase

logger = logging.getLogger("apitester.runner")

CaseCallback = Callable[[int, CaseRecord], None]


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def new_report(source: Optional[str] = None) -> SuiteReport:
    """Create an empty report stamped with the run's time, host and user."""
    return SuiteReport(
        started_at=datetime.now().replace(microsecond=0),
        hostname=socket.gethostname(),
        user=_current_user(),
        source=source,
    )


class SuiteRunner:
    """Runs test cases one at a time and aggregates their verdicts."""

    def __init__(
        self,
        executor: HttpExecutor,
        builder: Optional[RequestBuilder] = None,
        on_case: Optional[CaseCallback] = None,
    ):
        self.executor = executor
        self.builder = builder or RequestBuilder()
        self.on_case = on_case

    async def run_case(self, case: TestCase) -> CaseRecord:
        prepared = self.builder.build(case.request)
        result = await self.executor.execute(prepared)
        verdict = evaluate(case, result)
        return CaseRecord(case=case, result=result, verdict=verdict)

    async def run(
        self, cases: Sequence[TestCase], source: Optional[str] = None
    ) -> SuiteReport:
        """
        Execute every case in order.

        Args:
            cases: Test cases in declaration order
            source: Where the cases came from, shown in logs

        Returns:
            The completed report; ``total`` always equals ``len(cases)``
        """
        report = new_report(source)
        logger.info(f"Running {len(cases)} test case(s){f' from {source}' if source else ''}")

        for index, case in enumerate(cases):
            record = await self.run_case(case)
            report.add(record)
            logger.debug(
                f"Case {index + 1}/{len(cases)} '{case.description}': "
                f"{record.verdict.overall.value}"
            )
            if self.on_case:
                self.on_case(index, record)

        logger.info(
            f"Suite finished: {report.total} total, "
            f"{report.pass_count} passed, {report.fail_count} failed"
        )
        return report


async def run_suite(
    cases: Sequence[TestCase],
    *,
    default_headers: Sequence[str] = (),
    auth_header: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    verify_ssl: bool = True,
    follow_redirects: bool = False,
    debug: bool = False,
    on_case: Optional[CaseCallback] = None,
    source: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> SuiteReport:
    """Run ``cases`` with a freshly opened executor and return the report."""
    builder = RequestBuilder().with_default_headers(default_headers).with_auth(auth_header)
    async with HttpExecutor(
        timeout=timeout,
        verify_ssl=verify_ssl,
        follow_redirects=follow_redirects,
        debug=debug,
        client=client,
    ) as executor:
        runner = SuiteRunner(executor, builder, on_case=on_case)
        return await runner.run(cases, source=source)
