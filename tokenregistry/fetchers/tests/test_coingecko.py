"""
Tests for CoinGecko contract lookups.

Tests use mocks and don't make real API calls.
"""

import logging
from unittest.mock import Mock

import pytest
import requests

from conftest import BUSD, CAKE, WBNB
from tokenregistry.fetchers.base import FetchError
from tokenregistry.fetchers.coingecko import CoingeckoFetcher


def make_response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=payload or {})
    response.text = "error body"
    return response


@pytest.fixture
def session():
    session = Mock(spec=requests.Session)
    session.headers = {}
    return session


class TestCoingeckoFetcher:
    """Contract id lookups."""

    def test_headers(self, session):
        CoingeckoFetcher(api_key="demo-key", session=session)
        assert session.headers["accept"] == "application/json"
        assert session.headers["x-cg-demo-api-key"] == "demo-key"

    def test_contract_id(self, session):
        session.get.return_value = make_response(payload={"id": "pancakeswap-token"})
        fetcher = CoingeckoFetcher(base_url="https://cg.example/api/v3/", timeout=7, session=session)

        assert fetcher.get_contract_id("binance-smart-chain", CAKE) == "pancakeswap-token"
        session.get.assert_called_once_with(
            f"https://cg.example/api/v3/coins/binance-smart-chain/contract/{CAKE}", timeout=7
        )

    def test_unknown_contract(self, session):
        session.get.return_value = make_response(status_code=404)
        assert CoingeckoFetcher(session=session).get_contract_id("polygon-pos", CAKE) is None

    def test_api_error(self, session):
        session.get.return_value = make_response(status_code=429)
        with pytest.raises(FetchError, match="API error 429"):
            CoingeckoFetcher(session=session).get_contract_id("polygon-pos", CAKE)

    def test_request_error(self, session):
        session.get.side_effect = requests.exceptions.ConnectTimeout("timed out")
        with pytest.raises(FetchError, match="Request error"):
            CoingeckoFetcher(session=session).get_contract_id("polygon-pos", CAKE)

    def test_find_missing_ids(self, session, caplog):
        responses = {
            CAKE: make_response(payload={"id": "pancakeswap-token"}),
            WBNB: make_response(status_code=404),
        }
        session.get.side_effect = lambda url, timeout: responses[url.rsplit("/", 1)[1]]
        fetcher = CoingeckoFetcher(session=session)

        with caplog.at_level(logging.WARNING):
            found = fetcher.find_missing_ids(
                "binance-smart-chain", [CAKE, BUSD, WBNB, CAKE], {BUSD: "binance-usd"}
            )

        assert found == {CAKE: "pancakeswap-token", WBNB: None}
        assert session.get.call_count == 2
        assert any(WBNB in r.getMessage() for r in caplog.records)

    def test_find_missing_ids_survives_errors(self, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        found = CoingeckoFetcher(session=session).find_missing_ids("polygon-pos", [CAKE], {})
        assert found == {CAKE: None}
