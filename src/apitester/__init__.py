"""
apitester Package

This package lets a user compose, send and replay HTTP requests, and run
template-driven API test suites: each test case pairs a request with an
expected status code and, optionally, an expected response body, and the
suite runner reports which cases passed.

Features:
- Template model with an explicit suite / prefill mode
- Request building with default headers and Bearer or API-key auth
- Asynchronous HTTP execution with httpx and a hard timeout
- Whitespace-insensitive body comparison
- Deterministic text reports for terminals, pagers and files
- Command-line interface with request history and default headers
"""

__version__ = "0.1.0"

# Auth
from .auth import ApiKeyAuth, BearerAuth, resolve_auth_header

# Request building and execution
from .builder import PreparedRequest, RequestBuilder, build_request
from .evaluator import evaluate
from .executor import DEFAULT_TIMEOUT, HttpExecutor

# Exceptions
from .exceptions import (
    ApiTesterError,
    ConfigurationError,
    NetworkError,
    RequestError,
    SSLError,
    TemplateError,
    TimeoutError,
    TransportError,
    ValidationError,
)

# Models
from .models import (
    CaseRecord,
    CheckResult,
    ExecutionResult,
    HttpMethod,
    PrefillPlan,
    RequestSpec,
    SuitePlan,
    SuiteReport,
    Template,
    TestCase,
    Verdict,
)

# Suite running and reporting
from .report import render_report, save_report
from .runner import SuiteRunner, run_suite
from .templates import load_template_file, parse_template, save_template

__all__ = [
    # Models
    "HttpMethod",
    "RequestSpec",
    "TestCase",
    "Template",
    "SuitePlan",
    "PrefillPlan",
    "ExecutionResult",
    "CheckResult",
    "Verdict",
    "CaseRecord",
    "SuiteReport",
    # Building and execution
    "PreparedRequest",
    "RequestBuilder",
    "build_request",
    "HttpExecutor",
    "DEFAULT_TIMEOUT",
    "evaluate",
    "SuiteRunner",
    "run_suite",
    "render_report",
    "save_report",
    # Templates
    "load_template_file",
    "parse_template",
    "save_template",
    # Auth
    "BearerAuth",
    "ApiKeyAuth",
    "resolve_auth_header",
    # Exceptions
    "ApiTesterError",
    "TemplateError",
    "RequestError",
    "TransportError",
    "NetworkError",
    "TimeoutError",
    "SSLError",
    "ValidationError",
    "ConfigurationError",
]
