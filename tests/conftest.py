"""
Pytest configuration and shared fixtures for Catholic Schedule tests.

The Supabase client and the outbound HTTP client are replaced by mocks, so
the suite never touches the network.
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src to path so the suite runs without an editable install
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Set before any catholic_schedule module reads its configuration
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test_supabase_key")


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "api: marks tests that test API endpoints")
    config.addinivalue_line("markers", "integration: marks tests that test component integration")


@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ["TESTING"] = "true"
    yield
    os.environ.pop("TESTING", None)


# ─── SUPABASE MOCKS ────────────────────────────────────────────


def make_query(result=None):
    """
    A chainable query mock: select/eq/order/insert return the query itself.

    result is the rows returned by execute(), or an exception it raises.
    """
    query = Mock()
    for method in ("select", "eq", "order", "insert"):
        getattr(query, method).return_value = query
    if isinstance(result, BaseException):
        query.execute.side_effect = result
    else:
        query.execute.return_value = Mock(data=result if result is not None else [])
    return query


class BackendError(Exception):
    """Stands in for a client library error carrying the backend's message."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


@pytest.fixture
def make_supabase():
    """
    Factory for mock Supabase clients.

    tables maps table name to rows (or an exception); rpc is the
    nearby_churches result (rows or an exception). The per-table query
    mocks are exposed as ``client.queries``.
    """

    def factory(tables=None, rpc=None):
        client = Mock()
        queries = {name: make_query() for name in ("churches", "mass_times", "confession_times")}
        for name, result in (tables or {}).items():
            queries[name] = make_query(result)
        client.queries = queries
        client.table.side_effect = lambda name: queries.setdefault(name, make_query())
        client.rpc.return_value = make_query(rpc)

        client.auth.sign_in_with_password.return_value = Mock(
            session=Mock(access_token="test-access-token"),
            user=Mock(email="admin@example.org"),
        )
        client.auth.get_user.return_value = Mock(user=Mock(email="admin@example.org"))
        return client

    return factory


@pytest.fixture
def church_records():
    """Rows as returned by the nearby_churches procedure, nearest first."""
    return [
        {
            "id": 1,
            "name": "St. Monica",
            "address": "116 Thorn St",
            "city": "Sewickley",
            "state": "PA",
            "zip": "15143",
            "lat": 40.5375,
            "lng": -80.1817,
            "miles_away": 1.234,
        },
        {
            "id": 2,
            "name": "St. Mary",
            "address": "1 Church Rd",
            "city": "Beaver",
            "state": "PA",
            "zip": "15009",
            "lat": 40.6953,
            "lng": -80.3048,
            "miles_away": 4.5,
        },
    ]


@pytest.fixture
def mass_records():
    return [
        {"day_of_week": 0, "time": "10:30:00", "notes": None},
        {"day_of_week": 0, "time": "08:00:00", "notes": ""},
        {"day_of_week": 6, "time": "17:00:00", "notes": "Vigil"},
    ]


@pytest.fixture
def confession_records():
    return [
        {"day_of_week": 6, "start_time": "15:00:00", "end_time": "16:00:00", "notes": None},
        {"day_of_week": 3, "start_time": "18:30:00", "end_time": "19:00:00", "notes": "Lent only"},
    ]


# ─── HTTP MOCKS ────────────────────────────────────────────────


def make_http_response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if isinstance(payload, BaseException):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def zippopotam_payload():
    return {
        "post code": "15010",
        "country": "United States",
        "places": [
            {"place name": "Beaver Falls", "latitude": "40.7501", "longitude": "-80.3202", "state": "Pennsylvania"}
        ],
    }


@pytest.fixture
def mock_http_client(zippopotam_payload):
    """HTTP client whose GET answers with a successful ZIP lookup."""
    client = Mock()
    client.get.return_value = make_http_response(200, zippopotam_payload)
    return client


# ─── AUTH ──────────────────────────────────────────────────────


@pytest.fixture
def admin_client(make_supabase, church_records):
    """The JWT-bound client an authenticated session hands to the admin forms."""
    return make_supabase(tables={"churches": [{"id": r["id"], "name": r["name"]} for r in church_records]})


@pytest.fixture
def signed_in_session(make_supabase, admin_client):
    from catholic_schedule.core.session import AuthSession

    session = AuthSession(make_supabase(), client_factory=lambda token: admin_client)
    assert session.sign_in("admin@example.org", "secret")
    return session
