"""
CoinGecko contract lookups used to fill gaps in the coingecko id table.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

import requests

from .base import FetchError

logger = logging.getLogger(__name__)


class CoingeckoFetcher:
    """Looks up CoinGecko coin ids by token contract address."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout: float = 30.0,
        api_key: str = "",
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"accept": "application/json"})
        if api_key:
            self.session.headers.update({"x-cg-demo-api-key": api_key})
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def contract_url(self, platform: str, address: str) -> str:
        return f"{self.base_url}/coins/{platform}/contract/{address}"

    def get_contract_id(self, platform: str, address: str) -> Optional[str]:
        """
        Get the CoinGecko id of a token contract.

        Args:
            platform: CoinGecko asset platform id (e.g., 'binance-smart-chain')
            address: Token contract address

        Returns:
            The coin id, or None when CoinGecko does not know the contract

        Raises:
            FetchError: On request errors and unexpected responses
        """
        url = self.contract_url(platform, address)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request error for {address}: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise FetchError(f"API error {response.status_code} for {address}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON for {address}: {e}") from e
        return data.get("id") or None

    def find_missing_ids(
        self,
        platform: str,
        addresses: Iterable[str],
        known_ids: Mapping[str, str],
    ) -> Dict[str, Optional[str]]:
        """
        Look up every address that has no id in known_ids.

        Lookup failures are logged and reported as None; nothing is written.
        """
        found: Dict[str, Optional[str]] = {}
        for address in dict.fromkeys(addresses):
            if known_ids.get(address):
                continue
            try:
                coin_id = self.get_contract_id(platform, address)
            except FetchError as e:
                self.logger.warning(f"CoinGecko lookup failed for {address}: {e}")
                coin_id = None

            if coin_id:
                self.logger.info(f"{address}: {coin_id}")
            else:
                self.logger.warning(f"Coingecko ID not found for token: {address}")
            found[address] = coin_id
        return found
