# tests/conftest.py

import os

import orjson
import pytest
import respx

from apitester.config import ApiTesterConfig
from apitester.models import TestCase

# Set timezone for consistent test results
os.environ["TZ"] = "UTC"

BASE_URL = "http://localhost:3000"

USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
]

# Template in the on-disk layout, covering every kind of case
SAMPLE_TEMPLATE = {
    "method": "GET",
    "url": f"{BASE_URL}/users",
    "headers": "Accept: application/json",
    "body": "",
    "testcases": [
        {
            "desc": "List users",
            "method": "GET",
            "url": f"{BASE_URL}/users",
            "headers": "",
            "body": "",
            "expected_status": "200",
            "expected_body": "",
        },
        {
            "desc": "Create user",
            "method": "POST",
            "url": f"{BASE_URL}/users",
            "headers": "Content-Type: application/json",
            "body": '{"name": "Carol", "email": "carol@example.com"}',
            "expected_status": "201",
            "expected_body": '{"id": 3, "name": "Carol", "email": "carol@example.com"}',
        },
        {
            "desc": "Missing user",
            "method": "GET",
            "url": f"{BASE_URL}/users/42",
            "headers": "",
            "body": "",
            "expected_status": "200",
            "expected_body": "",
        },
    ],
}


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return BASE_URL


@pytest.fixture
def mock_router():
    """Create a mock router for httpx testing."""
    with respx.mock(assert_all_called=False) as router:
        yield router


def register_mock_endpoints(router, base_url: str = BASE_URL):
    """Register endpoints mirroring the demo users API."""
    router.get(f"{base_url}/users").respond(status_code=200, json=USERS)
    router.get(f"{base_url}/users/1").respond(status_code=200, text="Alice")
    router.get(f"{base_url}/users/42").respond(status_code=404, json={"error": "User not found"})
    router.post(f"{base_url}/users").respond(
        status_code=201,
        content=orjson.dumps({"id": 3, "name": "Carol", "email": "carol@example.com"}),
        headers={"content-type": "application/json"},
    )
    router.delete(f"{base_url}/users/1").respond(status_code=204)
    router.get(f"{base_url}/error").respond(status_code=500, json={"error": "Error with status 500"})
    return router


@pytest.fixture
def mock_api(mock_router, base_url):
    """Register mock API endpoints and return the router."""
    return register_mock_endpoints(mock_router, base_url)


@pytest.fixture
def sample_template_data():
    """Return a deep copy of the sample template in storage layout."""
    return orjson.loads(orjson.dumps(SAMPLE_TEMPLATE))


@pytest.fixture
def template_file(tmp_path, sample_template_data):
    """Write the sample template to disk and return its path."""
    path = tmp_path / "templates" / "users.json"
    path.parent.mkdir(parents=True)
    path.write_bytes(orjson.dumps(sample_template_data))
    return path


@pytest.fixture
def app_config(tmp_path):
    """Configuration with every file kept under tmp_path."""
    return ApiTesterConfig(
        templates_dir=str(tmp_path / "templates"),
        default_headers_file=str(tmp_path / "config" / "default_headers.conf"),
        history_file=str(tmp_path / "api_tester_history.log"),
    )


@pytest.fixture
def config_file(tmp_path, app_config):
    """Persist app_config and return the path for the --config option."""
    path = tmp_path / "config" / "apitester.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(app_config.model_dump()))
    return path


def make_case(**overrides) -> TestCase:
    """Build a TestCase with sensible defaults."""
    data = {
        "desc": "case",
        "method": "GET",
        "url": f"{BASE_URL}/users",
        "expected_status": "200",
    }
    data.update(overrides)
    return TestCase(**data)


@pytest.fixture
def case_factory():
    """Return the TestCase factory."""
    return make_case
