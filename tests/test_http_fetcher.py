"""
Tests for PriceFetcher with requests.get patched out.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from tracker.api import FetchError, FetchResult, PriceFetcher
from tracker.models import PriceUpdate


def make_response(status_code=200, payload=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def fetcher():
    return PriceFetcher(base_url="https://prices.test/", timeout=5)


def test_builds_single_request_with_all_ids(fetcher):
    with patch("tracker.api.http_fetcher.requests.get",
               return_value=make_response(payload={})) as mock_get:
        fetcher.fetch(["bitcoin", "ethereum"])

    mock_get.assert_called_once_with(
        "https://prices.test/api/v3/simple/price",
        params={"ids": "bitcoin,ethereum", "vs_currencies": "usd", "include_24hr_change": "true"},
        timeout=5,
    )


def test_success_maps_prices(fetcher):
    payload = {
        "bitcoin": {"usd": 50000, "usd_24h_change": 2.5},
        "ethereum": {"usd": 3000.5, "usd_24h_change": -1.25},
    }
    with patch("tracker.api.http_fetcher.requests.get", return_value=make_response(payload=payload)):
        result = fetcher.fetch(["bitcoin", "ethereum"])

    assert result.ok
    assert result.updates == {
        "bitcoin": PriceUpdate(50000.0, 2.5),
        "ethereum": PriceUpdate(3000.5, -1.25),
    }


def test_incomplete_and_missing_entries_are_omitted(fetcher):
    payload = {
        "bitcoin": {"usd": 50000, "usd_24h_change": 2.5},
        "solana": {"usd": 150},
        "tether": {"usd_24h_change": 0.01},
        "dogecoin": {"usd": "cheap", "usd_24h_change": 1.0},
        "tron": {"usd": -1, "usd_24h_change": 1.0},
        "cardano": None,
    }
    with patch("tracker.api.http_fetcher.requests.get", return_value=make_response(payload=payload)):
        result = fetcher.fetch(["bitcoin", "ethereum", "solana", "tether", "dogecoin", "tron", "cardano"])

    assert result.ok
    assert list(result.updates) == ["bitcoin"]


def test_non_200_is_a_fetch_error(fetcher):
    with patch("tracker.api.http_fetcher.requests.get", return_value=make_response(status_code=429)):
        result = fetcher.fetch(["bitcoin"])

    assert not result.ok
    assert isinstance(result.error, FetchError)
    assert result.error.status_code == 429
    assert result.updates == {}


def test_timeout_is_a_fetch_error(fetcher):
    with patch("tracker.api.http_fetcher.requests.get",
               side_effect=requests.exceptions.Timeout("read timed out")):
        result = fetcher.fetch(["bitcoin"])

    assert not result.ok
    assert "timeout" in result.error.reason


def test_connection_failure_is_a_fetch_error(fetcher):
    with patch("tracker.api.http_fetcher.requests.get",
               side_effect=requests.exceptions.ConnectionError("refused")):
        result = fetcher.fetch(["bitcoin"])

    assert not result.ok
    assert result.error.status_code is None


def test_malformed_json_is_a_fetch_error(fetcher):
    with patch("tracker.api.http_fetcher.requests.get",
               return_value=make_response(json_error=ValueError("Expecting value"))):
        result = fetcher.fetch(["bitcoin"])

    assert not result.ok
    assert "malformed JSON" in result.error.reason


def test_non_object_body_is_a_fetch_error(fetcher):
    with patch("tracker.api.http_fetcher.requests.get", return_value=make_response(payload=[1, 2])):
        result = fetcher.fetch(["bitcoin"])

    assert not result.ok


def test_empty_id_list_skips_request(fetcher):
    with patch("tracker.api.http_fetcher.requests.get") as mock_get:
        result = fetcher.fetch([])

    mock_get.assert_not_called()
    assert result.ok and result.updates == {}


def test_fetch_result_rejects_updates_with_error():
    with pytest.raises(ValueError):
        FetchResult(updates={"bitcoin": PriceUpdate(1.0, 1.0)}, error=FetchError("x"))
