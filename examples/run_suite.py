#!/usr/bin/env python
"""
Example running a template test suite from Python instead of the CLI.
Each case is printed as it finishes, then the full report is shown.
"""

import asyncio
import os

from apitester import CaseRecord, load_template_file, render_report, run_suite

TEMPLATE = os.path.join(os.path.dirname(__file__), "templates", "users.json")


def show_progress(index: int, record: CaseRecord) -> None:
    print(f"[{index + 1}] {record.case.description}: {record.verdict.overall.label}")


async def main():
    template = load_template_file(TEMPLATE)

    report = await run_suite(
        template.testcases,
        default_headers=["User-Agent: apitester-example"],
        timeout=10.0,
        on_case=show_progress,
        source=TEMPLATE,
    )

    print()
    print(render_report(report))
    print("All cases passed" if report.all_passed else f"{report.fail_count} case(s) failed")


if __name__ == "__main__":
    asyncio.run(main())
