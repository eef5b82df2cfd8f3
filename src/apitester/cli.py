"""
Command-line interface for apitester.

Runs template test suites headlessly, sends ad-hoc requests, and manages
templates, default headers and the request history.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import click
import uvloop
from tabulate import tabulate

from .auth import resolve_auth_header
from .builder import RequestBuilder
from .config import (
    ApiTesterConfig,
    add_default_header,
    load_config,
    load_default_headers,
    remove_default_header,
)
from .exceptions import ApiTesterError, TemplateError, TransportError
from .executor import HttpExecutor
from .history import HistoryEntry, append_entry, clear_history, filter_history, read_history
from .models import CaseRecord, HttpMethod, PrefillPlan, RequestSpec, Template, TestCase
from .report import default_results_filename, render_report, save_report
from .runner import run_suite
from .templates import (
    get_template_path,
    list_templates,
    load_template_file,
    resolve_template,
    save_template,
)
from .utils import format_curl_command, pretty_json

# Configure logging
logging.basicConfig(
    level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("apitester.cli")

SEPARATOR = "=" * 50
METHOD_CHOICE = click.Choice([m.value for m in HttpMethod], case_sensitive=False)


def _config(ctx) -> ApiTesterConfig:
    return ctx.obj["config"]


def _default_headers(config: ApiTesterConfig, skip: bool = False) -> Sequence[str]:
    if skip:
        return ()
    return load_default_headers(config.default_headers_file)


def _auth_header(bearer: Optional[str], api_key: Optional[str]) -> Optional[str]:
    try:
        return resolve_auth_header(bearer=bearer, api_key=api_key)
    except ApiTesterError as e:
        raise click.ClickException(e.message)


def _load_template(path: str) -> Template:
    try:
        return load_template_file(path)
    except TemplateError as e:
        raise click.ClickException(e.message)


def _write_history(config: ApiTesterConfig, entry: HistoryEntry) -> None:
    if not config.history_enabled:
        return
    try:
        append_entry(config.history_file, entry)
    except OSError as e:
        logger.warning(f"Could not write history to {config.history_file}: {e}")


def _record_case(config: ApiTesterConfig):
    def on_case(index: int, record: CaseRecord) -> None:
        case = record.case
        logger.debug(f"Case {index + 1} finished with status {record.result.status_display}")
        _write_history(
            config,
            HistoryEntry.from_result(
                case.method.value, case.url, case.headers, case.body, record.result
            ),
        )

    return on_case


def execute_suite(
    ctx,
    cases: Sequence[TestCase],
    source: str,
    timeout: Optional[float],
    auth_header: Optional[str],
    no_defaults: bool,
    pager: bool,
    save: Optional[str],
) -> None:
    """Run a suite and display its report."""
    config = _config(ctx)
    report = uvloop.run(
        run_suite(
            cases,
            default_headers=_default_headers(config, no_defaults),
            auth_header=auth_header,
            timeout=timeout or config.timeout,
            verify_ssl=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            debug=ctx.obj["debug"],
            on_case=_record_case(config),
            source=source,
        )
    )

    text = render_report(report)
    if pager:
        click.echo_via_pager(text)
    else:
        click.echo(text)

    if save:
        target = Path(save)
        if target.is_dir():
            target = target / default_results_filename(report)
        path = save_report(report, target)
        click.echo(f"Results saved to: {path}")


def send_single(
    ctx,
    spec: RequestSpec,
    timeout: Optional[float],
    no_defaults: bool = False,
    curl: bool = False,
    export: Optional[str] = None,
) -> None:
    """Send one request, show the response and record it in the history."""
    config = _config(ctx)
    timeout = timeout or config.timeout
    prepared = (
        RequestBuilder().with_default_headers(_default_headers(config, no_defaults)).build(spec)
    )

    if curl:
        click.echo(
            format_curl_command(
                prepared.method.value, prepared.url, prepared.headers, prepared.content, timeout
            )
        )
        return

    async def _send():
        async with HttpExecutor(
            timeout=timeout,
            verify_ssl=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            debug=ctx.obj["debug"],
        ) as executor:
            return await executor.send(prepared)

    try:
        result = uvloop.run(_send())
    except TransportError as e:
        raise click.ClickException(f"Failed to contact API endpoint.\n{e.message}")

    click.echo(f"Status: {result.status_display}")
    click.echo(f"Time: {result.elapsed_seconds:.3f}s")
    click.echo(f"Size: {result.size_bytes} bytes")
    click.echo(SEPARATOR)
    click.echo("Raw Response:")
    click.echo(result.actual_body)
    formatted = pretty_json(result.actual_body)
    if formatted is not None:
        click.echo(SEPARATOR)
        click.echo("Pretty JSON:")
        click.echo(formatted)

    _write_history(
        config, HistoryEntry.from_result(spec.method.value, spec.url, spec.headers, spec.body, result)
    )

    if export:
        with open(export, "w", encoding="utf-8") as f:
            f.write(result.actual_body + "\n")
        click.echo(f"Response saved to {export}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(dir_okay=False), help="Path to config file")
@click.pass_context
def cli(ctx, debug, config):
    """API Tester - send HTTP requests and run template test suites."""
    if debug:
        logging.getLogger("apitester").setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    try:
        ctx.obj["config"] = load_config(config)
    except ApiTesterError as e:
        raise click.ClickException(e.message)


@cli.command()
@click.argument("template_file", type=click.Path(dir_okay=False))
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("--save", type=click.Path(), help="Save the report to a file or directory")
@click.option("--pager", is_flag=True, help="Show the report in a pager")
@click.option("--bearer", help="Bearer token sent with every case")
@click.option("--api-key", help="API key header sent with every case, as NAME=VALUE")
@click.option("--no-defaults", is_flag=True, help="Do not send the default headers")
@click.pass_context
def run(ctx, template_file, timeout, save, pager, bearer, api_key, no_defaults):
    """Run the test cases of TEMPLATE_FILE and print the report."""
    template = _load_template(template_file)
    if not template.is_suite:
        raise click.ClickException("No testcases found in template.")

    auth_header = _auth_header(bearer, api_key)
    execute_suite(
        ctx, template.testcases, template_file, timeout, auth_header, no_defaults, pager, save
    )


@cli.command()
@click.argument("template")
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("--save", type=click.Path(), help="Save the suite report to a file or directory")
@click.option("--export", type=click.Path(dir_okay=False), help="Save the response body to a file")
@click.option("--pager", is_flag=True, help="Show the suite report in a pager")
@click.pass_context
def load(ctx, template, timeout, save, export, pager):
    """Load TEMPLATE: run its test cases, or send its request if it has none."""
    config = _config(ctx)
    path = resolve_template(template, config.templates_dir)
    loaded = _load_template(str(path))

    try:
        plan = loaded.plan()
    except TemplateError as e:
        raise click.ClickException(e.message)

    if isinstance(plan, PrefillPlan):
        request = plan.request
        click.echo(f"Method: {request.method.value}")
        click.echo(f"URL: {request.url}")
        send_single(ctx, request, timeout, export=export)
    else:
        execute_suite(ctx, plan.cases, str(path), timeout, None, False, pager, save)


@cli.command()
@click.argument("url")
@click.option("-X", "--method", type=METHOD_CHOICE, default="GET", help="HTTP method")
@click.option("-H", "--header", "headers", multiple=True, help="Header as 'Name: Value'")
@click.option("-d", "--data", "body", default="", help="Request body (ignored for GET)")
@click.option("--bearer", help="Bearer token")
@click.option("--api-key", help="API key header as NAME=VALUE")
@click.option("-t", "--timeout", type=float, help="Request timeout in seconds")
@click.option("--no-defaults", is_flag=True, help="Do not send the default headers")
@click.option("--curl", is_flag=True, help="Print the equivalent curl command instead")
@click.option("--export", type=click.Path(dir_okay=False), help="Save the response body to a file")
@click.pass_context
def send(ctx, url, method, headers, body, bearer, api_key, timeout, no_defaults, curl, export):
    """Send a single request to URL."""
    auth_header = _auth_header(bearer, api_key)
    spec = RequestSpec(method=method, url=url, headers=headers, body=body, auth_header=auth_header)
    send_single(ctx, spec, timeout, no_defaults=no_defaults, curl=curl, export=export)


@cli.command(name="save-template")
@click.argument("name")
@click.option("-X", "--method", type=METHOD_CHOICE, default="GET", help="HTTP method")
@click.option("--url", default="", help="Request URL")
@click.option("-H", "--header", "headers", multiple=True, help="Header as 'Name: Value'")
@click.option("-d", "--data", "body", default="", help="Request body")
@click.option("--force", is_flag=True, help="Overwrite an existing template")
@click.pass_context
def save_template_cmd(ctx, name, method, url, headers, body, force):
    """Save a request as template NAME."""
    config = _config(ctx)
    path = get_template_path(name, config.templates_dir)
    if path.exists() and not force:
        raise click.ClickException(f"Template '{path.name}' already exists, use --force")

    template = Template(method=method, url=url, headers=headers, body=body)
    save_template(template, path)
    click.echo(f"Template '{path.name}' saved in {path.parent}.")


@cli.command(name="add-case")
@click.argument("template")
@click.option("--desc", default="", help="Test case description")
@click.option("-X", "--method", type=METHOD_CHOICE, default="GET", help="HTTP method")
@click.option("--url", required=True, help="Request URL")
@click.option("-H", "--header", "headers", multiple=True, help="Header as 'Name: Value'")
@click.option("-d", "--data", "body", default="", help="Request body")
@click.option("--expect-status", required=True, help="Expected HTTP status code")
@click.option("--expect-body", default="", help="Expected response body")
@click.pass_context
def add_case(ctx, template, desc, method, url, headers, body, expect_status, expect_body):
    """Append a test case to TEMPLATE."""
    config = _config(ctx)
    path = resolve_template(template, config.templates_dir)
    loaded = _load_template(str(path))

    case = TestCase(
        desc=desc,
        method=method,
        url=url,
        headers=headers,
        body=body,
        expected_status=expect_status,
        expected_body=expect_body,
    )
    updated = loaded.with_case(case)
    save_template(updated, path)
    click.echo(f"Added test case {len(updated.testcases)} to '{path.name}'.")


@cli.command(name="list-templates")
@click.pass_context
def list_all_templates(ctx):
    """List all available request templates."""
    templates = list_templates(_config(ctx).templates_dir)

    if not templates:
        click.echo("No templates found")
        return

    table_data = [
        (name, t.method.value, t.url, len(t.testcases)) for name, t in templates
    ]
    headers = ["Template Name", "Method", "URL", "Test Cases"]
    click.echo(tabulate(table_data, headers=headers, tablefmt="grid"))


@cli.command()
@click.option("-f", "--filter", "keyword", help="Only show lines around this keyword")
@click.pass_context
def history(ctx, keyword):
    """Show request history."""
    text = read_history(_config(ctx).history_file)
    if not text:
        click.echo("No history available.")
        return

    if keyword:
        matches = filter_history(text, keyword)
        if not matches:
            click.echo(f"No history entries match '{keyword}'.")
            return
        click.echo("\n".join(matches))
    else:
        click.echo(text, nl=False)


@cli.command(name="clear-history")
@click.confirmation_option(prompt="Are you sure you want to delete all history?")
@click.pass_context
def clear_history_cmd(ctx):
    """Delete all history."""
    clear_history(_config(ctx).history_file)
    click.echo("History cleared.")


@cli.group()
def defaults():
    """Manage default headers sent with every request."""


@defaults.command(name="list")
@click.pass_context
def defaults_list(ctx):
    """Show the default headers."""
    headers = load_default_headers(_config(ctx).default_headers_file)
    if not headers:
        click.echo("No default headers.")
        return
    for line in headers:
        click.echo(line)


@defaults.command(name="add")
@click.argument("header")
@click.pass_context
def defaults_add(ctx, header):
    """Add HEADER ('Name: Value') to the default headers."""
    try:
        add_default_header(_config(ctx).default_headers_file, header)
    except ApiTesterError as e:
        raise click.ClickException(e.message)
    click.echo("Header added.")


@defaults.command(name="remove")
@click.argument("header")
@click.pass_context
def defaults_remove(ctx, header):
    """Remove HEADER from the default headers."""
    if not remove_default_header(_config(ctx).default_headers_file, header):
        raise click.ClickException(f"Default header '{header}' not found.")
    click.echo("Header removed.")


def main():
    """Main CLI entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("Request canceled.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
