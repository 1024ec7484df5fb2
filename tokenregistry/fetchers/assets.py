"""
Icon sources: the local asset directory and the community allowlist.
"""

import asyncio
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

import aiohttp
from eth_utils import is_address, to_checksum_address

from .base import BaseFetcher, FetchError, FetchResult

logger = logging.getLogger(__name__)

ICON_SUFFIX = ".png"


def normalize_addresses(entries: Iterable) -> Tuple[FrozenSet[str], int]:
    """
    Checksum every entry that is an address.

    Returns:
        (checksummed addresses, number of skipped entries)
    """
    addresses = set()
    skipped = 0
    for entry in entries:
        if isinstance(entry, str) and is_address(entry):
            addresses.add(to_checksum_address(entry))
        else:
            skipped += 1
    return frozenset(addresses), skipped


class LocalAssetIndex:
    """Index of the icons shipped in the registry's assets directory."""

    def __init__(self, assets_dir: Path):
        self.assets_dir = Path(assets_dir)

    def chain_dir(self, chain_id: int) -> Path:
        return self.assets_dir / str(chain_id)

    def addresses(self, chain_id: int) -> FrozenSet[str]:
        """Addresses with a `<address>.png` icon for a chain."""
        directory = self.chain_dir(chain_id)
        if not directory.is_dir():
            logger.debug(f"No local assets for chain {chain_id} in {directory}")
            return frozenset()

        stems = [
            path.stem for path in sorted(directory.iterdir())
            if path.suffix == ICON_SUFFIX and path.stem != "native"
        ]
        addresses, skipped = normalize_addresses(stems)
        if skipped:
            logger.debug(f"Ignored {skipped} non-address icons in {directory}")
        return addresses


class CommunityAllowlistFetcher(BaseFetcher):
    """
    Fetches a community asset repository's allowlist for one network.

    The allowlist is a JSON array of token addresses that have a community
    maintained icon.
    """

    def __init__(
        self,
        network: str,
        url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(network, timeout)
        self.url = url
        self.session = session

    async def fetch(self) -> FetchResult:
        """
        Download and normalize the allowlist.

        Returns:
            FetchResult whose data is a frozenset of checksummed addresses

        Raises:
            FetchError: On HTTP errors, timeouts or an unexpected payload
        """
        self.logger.info(f"[{self.network}] Fetching community allowlist from {self.url}")
        try:
            if self.session is not None:
                payload = await self._get(self.session)
            else:
                async with aiohttp.ClientSession() as session:
                    payload = await self._get(session)
        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(f"[{self.network}] Allowlist request failed: {e}") from e

        if not isinstance(payload, list):
            raise FetchError(f"[{self.network}] Allowlist is not a JSON array: {self.url}")

        addresses, skipped = normalize_addresses(payload)
        if skipped:
            self.logger.warning(f"[{self.network}] Skipped {skipped} invalid allowlist entries")

        return FetchResult(
            success=True,
            data=addresses,
            source=self.url,
            metadata={"entries": len(payload), "skipped": skipped},
        )

    async def _get(self, session: aiohttp.ClientSession):
        async with session.get(
            self.url, timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            if response.status != 200:
                raise FetchError(
                    f"[{self.network}] Failed to fetch allowlist: HTTP {response.status}"
                )
            return await response.json(content_type=None)
