"""
Registry assembly pipeline.

Pipeline stages:
1. Load the curated lists and static data tables
2. Verify every address is checksummed (before any network call)
3. Merge the eligible, listed and ui tiers per network
4. Resolve token metadata and fetch the community icon allowlist concurrently
5. Derive colors and icons, and assemble every artifact in memory
6. Write all artifacts, only once every network succeeded
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from web3 import Web3

from tokenregistry.batchers import BatchConfig, TokenMetadataBatcher
from tokenregistry.config import ConfigManager, NetworkConfig
from tokenregistry.core.storage import JsonStorage
from tokenregistry.fetchers import CoingeckoFetcher, CommunityAllowlistFetcher, LocalAssetIndex
from tokenregistry.registry.artifacts import Artifact, ArtifactGenerator, NetworkContext, utc_now
from tokenregistry.registry.attributes import AttributeDeriver, IconSources
from tokenregistry.registry.inputs import RegistryInputs
from tokenregistry.registry.lists import merge_token_lists, tiers_by_address
from tokenregistry.registry.metadata import MetadataResolver
from tokenregistry.registry.models import AddressListSet, NetworkData
from tokenregistry.registry.verifier import verify_inputs

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Artifacts of a run, staged in memory."""

    artifacts: Dict[str, Artifact]
    contexts: List[NetworkContext] = field(default_factory=list)
    overlaps: List[Tuple[str, str, str]] = field(default_factory=list)

    @property
    def paths(self) -> List[str]:
        return list(self.artifacts)


class RegistryBuilder:
    """Build the token registry for every active network."""

    def __init__(
        self,
        config: ConfigManager,
        web3_factory: Optional[Callable[[NetworkConfig], Web3]] = None,
        allowlist_fetcher_factory: Optional[Callable[[NetworkConfig, str], CommunityAllowlistFetcher]] = None,
        clock: Optional[Callable] = None,
    ):
        """
        Initialize the builder.

        Args:
            config: Configuration manager
            web3_factory: Creates the Web3 client of a network
            allowlist_fetcher_factory: Creates the allowlist fetcher of a network
            clock: Returns the current UTC datetime for token list timestamps
        """
        self.config = config
        self.web3_factory = web3_factory or self._default_web3
        self.allowlist_fetcher_factory = allowlist_fetcher_factory or self._default_allowlist_fetcher
        self.inputs = RegistryInputs.from_config(config.registry)
        self.generator = ArtifactGenerator(config.registry, clock=clock or utc_now)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _default_web3(self, network: NetworkConfig) -> Web3:
        return Web3(Web3.HTTPProvider(
            network.rpc_url,
            request_kwargs={"timeout": self.config.registry.HTTP_TIMEOUT_SECONDS},
        ))

    def _default_allowlist_fetcher(self, network: NetworkConfig, url: str) -> CommunityAllowlistFetcher:
        return CommunityAllowlistFetcher(
            network.name, url, timeout=self.config.registry.HTTP_TIMEOUT_SECONDS
        )

    def allowlist_url(self, network: NetworkConfig) -> str:
        base_url = self.config.registry.COMMUNITY_ASSETS_BASE_URL.rstrip("/")
        return f"{base_url}/{network.community_chain}/allowlist.json"

    async def build(self) -> BuildResult:
        """
        Run every stage except the write.

        Raises:
            ChecksumError: If an input address is not checksummed
            DataError: If an input file is missing or malformed
            MetadataError: If the metadata multicall fails
            FetchError: If the community allowlist cannot be fetched
        """
        networks = self.config.chains.active_networks
        names = [network.name for network in networks]

        lists = self.inputs.load_lists(names)
        data = self.inputs.load_data(names)
        overlaps = verify_inputs(lists)

        local_assets = LocalAssetIndex(self.config.registry.assets_dir)
        contexts = []
        for network in networks:
            context = await self._build_network(
                network, lists[network.name], data.for_network(network.name), local_assets
            )
            contexts.append(context)

        artifacts = self.generator.generate(contexts)
        return BuildResult(artifacts=artifacts, contexts=contexts, overlaps=overlaps)

    async def _build_network(
        self,
        network: NetworkConfig,
        lists: AddressListSet,
        data: NetworkData,
        local_assets: LocalAssetIndex,
    ) -> NetworkContext:
        merged = merge_token_lists(lists)
        sources = tiers_by_address(lists)
        multi_tier = [address for address, tiers in sources.items() if len(tiers) > 1]
        self.logger.info(
            f"[{network.name}] {len(sources)} unique tokens, {len(multi_tier)} in several tiers"
        )

        batcher = TokenMetadataBatcher(
            self.web3_factory(network),
            network.multicall_address,
            BatchConfig(tolerant=self.config.registry.tolerant_multicall),
            multicall3_address=network.multicall3_address,
        )
        resolver = MetadataResolver(batcher, network.name)

        metadata, community = await asyncio.gather(
            resolver.resolve(merged, data.metadata_overrides),
            self._community_icons(network),
        )

        icons = IconSources(local=local_assets.addresses(network.chain_id), community=community)
        deriver = AttributeDeriver(
            network,
            data,
            icons,
            assets_base_url=self.config.registry.ASSETS_BASE_URL,
            community_base_url=self.config.registry.COMMUNITY_ASSETS_BASE_URL,
        )
        return NetworkContext(
            config=network, lists=lists, data=data, metadata=metadata, deriver=deriver
        )

    async def _community_icons(self, network: NetworkConfig) -> FrozenSet[str]:
        if not network.community_chain:
            return frozenset()
        fetcher = self.allowlist_fetcher_factory(network, self.allowlist_url(network))
        result = await fetcher.fetch()
        self.logger.info(f"[{network.name}] {len(result.data)} community icons")
        return result.data

    def write(self, result: BuildResult) -> int:
        """Write every staged artifact to the output directory."""
        storage = JsonStorage({"base_path": self.config.registry.output_dir})
        written = storage.save_all(
            (path, document, indent) for path, (document, indent) in result.artifacts.items()
        )
        self.logger.info(f"Wrote {written} files to {self.config.registry.output_dir}")
        return written

    async def run(self) -> BuildResult:
        """Build the registry and write it."""
        result = await self.build()
        self.write(result)
        return result

    def find_missing_coingecko_ids(
        self, fetcher: Optional[CoingeckoFetcher] = None
    ) -> Dict[str, Dict[str, Optional[str]]]:
        """
        Look up CoinGecko ids for merged addresses missing from coingecko.json.

        Nothing is written; results are logged and returned by network.
        """
        registry = self.config.registry
        fetcher = fetcher or CoingeckoFetcher(
            base_url=registry.COINGECKO_API_URL,
            timeout=registry.HTTP_TIMEOUT_SECONDS,
            api_key=registry.COINGECKO_API_KEY,
        )

        networks = self.config.chains.active_networks
        names = [network.name for network in networks]
        lists = self.inputs.load_lists(names)
        data = self.inputs.load_data(names)

        report = {}
        for network in networks:
            if not network.coingecko_platform:
                self.logger.info(f"[{network.name}] No CoinGecko platform, skipped")
                continue
            report[network.name] = fetcher.find_missing_ids(
                network.coingecko_platform,
                merge_token_lists(lists[network.name]),
                data.coingecko_ids.get(network.name, {}),
            )
        return report
