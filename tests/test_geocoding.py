"""
Tests for ZIP code resolution.
"""

from unittest.mock import Mock

import pytest
import requests

from conftest import make_http_response

from catholic_schedule import config
from catholic_schedule.core.errors import InvalidInputError, NotFoundError, RemoteFailureError
from catholic_schedule.core.geocoding import clean_zip_code, zip_to_lat_lng
from catholic_schedule.core.models import Coordinates


def test_zip_resolves_to_first_place(mock_http_client):
    coordinates = zip_to_lat_lng("15010", mock_http_client)

    assert coordinates == Coordinates(40.7501, -80.3202)
    expected_url = f"{config.GEOCODER_BASE_URL.rstrip('/')}/{config.GEOCODER_COUNTRY}/15010"
    mock_http_client.get.assert_called_once_with(expected_url)


def test_surrounding_whitespace_is_stripped(mock_http_client):
    zip_to_lat_lng("  15010 \n", mock_http_client)

    assert mock_http_client.get.call_args[0][0].endswith("/15010")


@pytest.mark.parametrize("zip_code", ["", "   ", "1501", "150100", "abcde", "15 10", "1501a", "15010-1234", None])
def test_malformed_zip_is_rejected_without_a_request(zip_code, mock_http_client):
    with pytest.raises(InvalidInputError) as exc_info:
        zip_to_lat_lng(zip_code, mock_http_client)

    assert exc_info.value.message == "Please enter a valid 5-digit ZIP code."
    assert exc_info.value.field == "zip"
    mock_http_client.get.assert_not_called()


def test_clean_zip_code_returns_digits():
    assert clean_zip_code(" 02134 ") == "02134"


def test_unknown_zip_is_not_found():
    http_client = Mock()
    http_client.get.return_value = make_http_response(404, {})

    with pytest.raises(NotFoundError) as exc_info:
        zip_to_lat_lng("00000", http_client)

    assert exc_info.value.message == "Could not find that ZIP code."
    assert exc_info.value.http_status == 404


@pytest.mark.parametrize(
    "payload",
    [
        {"places": []},
        {"post code": "15010"},
        [],
        {"places": [{"latitude": "north", "longitude": "-80.3"}]},
        {"places": [{"longitude": "-80.3"}]},
        ValueError("not json"),
    ],
    ids=["no-places", "missing-places", "not-an-object", "bad-latitude", "missing-latitude", "invalid-json"],
)
def test_unusable_lookup_body_is_not_found(payload):
    http_client = Mock()
    http_client.get.return_value = make_http_response(200, payload)

    with pytest.raises(NotFoundError):
        zip_to_lat_lng("15010", http_client)


def test_transport_failure_is_a_remote_failure():
    http_client = Mock()
    http_client.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(RemoteFailureError) as exc_info:
        zip_to_lat_lng("15010", http_client)

    assert "connection refused" in exc_info.value.message
    assert exc_info.value.http_status == 502


def test_timeout_is_a_remote_failure():
    http_client = Mock()
    http_client.get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(RemoteFailureError):
        zip_to_lat_lng("15010", http_client)
