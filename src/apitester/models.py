"""
Data models for the apitester package.
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import TemplateError


class HttpMethod(str, Enum):
    """HTTP methods a request or test case may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def split_header_lines(value: Any) -> Tuple[str, ...]:
    """
    Normalize stored headers into a tuple of raw lines.

    Templates store headers as one newline-joined string; literal ``\\n``
    sequences are treated as line breaks as well. Lines are kept verbatim,
    trimming happens in the request builder.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(value.replace("\\n", "\n").splitlines())
    return tuple(str(line) for line in value)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _method(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class RequestSpec(BaseModel):
    """One concrete HTTP request as entered by a user or stored in a template."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod = HttpMethod.GET
    url: str = Field(..., min_length=1)
    headers: Tuple[str, ...] = ()
    body: str = ""
    auth_header: Optional[str] = None

    normalize_method = field_validator("method", mode="before")(_method)
    normalize_headers = field_validator("headers", mode="before")(split_header_lines)
    normalize_body = field_validator("body", mode="before")(_text)

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v):
        return _text(v).strip()


class TestCase(BaseModel):
    """A request paired with its expected status and, optionally, body."""

    __test__: ClassVar[bool] = False

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str = Field(default="", alias="desc")
    method: HttpMethod = HttpMethod.GET
    url: str = Field(..., min_length=1)
    headers: Tuple[str, ...] = ()
    body: str = ""
    expected_status: str = ""
    expected_body: str = ""

    normalize_method = field_validator("method", mode="before")(_method)
    normalize_headers = field_validator("headers", mode="before")(split_header_lines)
    normalize_text = field_validator(
        "description", "body", "expected_status", "expected_body", mode="before"
    )(_text)

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v):
        return _text(v).strip()

    @property
    def request(self) -> RequestSpec:
        return RequestSpec(method=self.method, url=self.url, headers=self.headers, body=self.body)

    def to_storage(self) -> dict:
        return {
            "desc": self.description,
            "method": self.method.value,
            "url": self.url,
            "headers": "\n".join(self.headers),
            "body": self.body,
            "expected_status": self.expected_status,
            "expected_body": self.expected_body,
        }


class SuitePlan(BaseModel):
    """Template mode: run every test case."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["suite"] = "suite"
    cases: Tuple[TestCase, ...]


class PrefillPlan(BaseModel):
    """Template mode: send the template's single default request."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prefill"] = "prefill"
    request: RequestSpec


TemplatePlan = Union[SuitePlan, PrefillPlan]


class Template(BaseModel):
    """A persisted request definition, optionally carrying a test-case suite."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod = HttpMethod.GET
    url: str = ""
    headers: Tuple[str, ...] = ()
    body: str = ""
    testcases: Tuple[TestCase, ...] = ()

    normalize_method = field_validator("method", mode="before")(_method)
    normalize_headers = field_validator("headers", mode="before")(split_header_lines)
    normalize_text = field_validator("url", "body", mode="before")(_text)

    @field_validator("testcases", mode="before")
    @classmethod
    def null_testcases(cls, v):
        return () if v is None else v

    @property
    def is_suite(self) -> bool:
        return len(self.testcases) > 0

    def plan(self) -> TemplatePlan:
        """Resolve the template into either a suite run or a prefilled request."""
        if self.is_suite:
            return SuitePlan(cases=self.testcases)
        if not self.url.strip():
            raise TemplateError("Template has no test cases and no request URL to prefill")
        return PrefillPlan(
            request=RequestSpec(
                method=self.method, url=self.url, headers=self.headers, body=self.body
            )
        )

    def with_case(self, case: TestCase) -> "Template":
        return self.model_copy(update={"testcases": self.testcases + (case,)})

    def to_storage(self) -> dict:
        """Convert to the on-disk JSON layout."""
        return {
            "method": self.method.value,
            "url": self.url,
            "headers": "\n".join(self.headers),
            "body": self.body,
            "testcases": [case.to_storage() for case in self.testcases],
        }


class ExecutionResult(BaseModel):
    """
    Outcome of sending one request.

    A received response of any status is a normal result. ``transport_error``
    is set only when no HTTP response was obtained at all.
    """

    actual_status: Optional[int] = None
    actual_body: str = ""
    elapsed_ms: float = 0.0
    size_bytes: int = 0
    transport_error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.transport_error is None

    @property
    def status_display(self) -> str:
        return "N/A" if self.actual_status is None else str(self.actual_status)

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ms / 1000.0


class CheckResult(str, Enum):
    """Outcome of a single checked dimension."""

    PASS = "PASS"
    FAIL = "FAIL"
    NOT_APPLICABLE = "NOT_APPLICABLE"

    @property
    def label(self) -> str:
        return "N/A" if self is CheckResult.NOT_APPLICABLE else self.value


class Verdict(BaseModel):
    """Per-case comparison of actual versus expected outcome."""

    model_config = ConfigDict(frozen=True)

    status_result: CheckResult
    body_result: CheckResult

    @property
    def overall(self) -> CheckResult:
        if self.status_result is CheckResult.PASS and self.body_result is not CheckResult.FAIL:
            return CheckResult.PASS
        return CheckResult.FAIL

    @property
    def passed(self) -> bool:
        return self.overall is CheckResult.PASS


class CaseRecord(BaseModel):
    """One executed case with its result and verdict."""

    model_config = ConfigDict(frozen=True)

    case: TestCase
    result: ExecutionResult
    verdict: Verdict


class SuiteReport(BaseModel):
    """Ordered results of a suite run with pass/fail tallies."""

    records: List[CaseRecord] = Field(default_factory=list)
    pass_count: int = 0
    fail_count: int = 0
    started_at: datetime = Field(default_factory=datetime.now)
    hostname: str = ""
    user: str = ""
    source: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def all_passed(self) -> bool:
        return self.fail_count == 0

    def add(self, record: CaseRecord) -> None:
        self.records.append(record)
        if record.verdict.passed:
            self.pass_count += 1
        else:
            self.fail_count += 1
