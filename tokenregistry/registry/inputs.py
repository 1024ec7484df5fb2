"""
Loading of the curated lists and static data tables.

List files are required; data files are optional and default to empty
tables. Every file is keyed by network, and a missing network section is an
empty section.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping

from eth_utils import is_address, to_checksum_address

from ..config.registry import RegistryConfig
from ..core.storage import DataError, JsonStorage
from .models import AddressListSet, RegistryData

logger = logging.getLogger(__name__)

LIST_FILES = {
    "eligible": "eligible.json",
    "listed": "listed.json",
    "ui": "ui-not-eligible.json",
    "untrusted": "untrusted.json",
}

METADATA_FILE = "metadataOverwrite.json"
COLOR_FILE = "color.json"
PRECISION_FILE = "precision.json"
COINGECKO_FILE = "coingecko.json"

PALETTE_KEY = "list"


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise DataError(message)


def _network_section(document: Mapping[str, Any], network: str, expected: type, source: str):
    section = document.get(network, expected())
    _require(
        isinstance(section, expected),
        f"{source}: section '{network}' must be a JSON {'object' if expected is dict else 'array'}",
    )
    return section


def _address_table(
    section: Mapping[str, Any],
    source: str,
    check_value: Callable[[Any], bool],
    description: str,
) -> Dict[str, Any]:
    """Re-key a data table by checksummed address, validating every value."""
    table = {}
    for address, value in section.items():
        _require(is_address(address), f"{source}: invalid address key {address!r}")
        _require(check_value(value), f"{source}: {description} expected for {address}, got {value!r}")
        table[to_checksum_address(address)] = value
    return table


def _is_precision(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class RegistryInputs:
    """Reads registry inputs from the lists and data directories."""

    def __init__(self, lists_dir: Path, data_dir: Path):
        self.lists = JsonStorage({"base_path": lists_dir})
        self.data = JsonStorage({"base_path": data_dir})

    @classmethod
    def from_config(cls, config: RegistryConfig) -> "RegistryInputs":
        return cls(config.lists_dir, config.data_dir)

    def _load_document(self, storage: JsonStorage, filename: str, required: bool) -> Dict[str, Any]:
        document = storage.load(filename, default={}, required=required)
        _require(isinstance(document, dict), f"{filename}: top level must be a JSON object")
        return document

    def load_lists(self, networks: Iterable[str]) -> Dict[str, AddressListSet]:
        """
        Load the four curated lists for each network.

        Raises:
            DataError: If a list file is missing or has the wrong shape
        """
        documents = {
            tier: self._load_document(self.lists, filename, required=True)
            for tier, filename in LIST_FILES.items()
        }

        lists = {}
        for network in networks:
            sections = {}
            for tier, filename in LIST_FILES.items():
                expected = dict if tier == "eligible" else list
                sections[tier] = _network_section(documents[tier], network, expected, filename)
            lists[network] = AddressListSet(network=network, **sections)
            logger.debug(
                f"[{network}] Loaded lists: "
                + ", ".join(f"{tier}={len(sections[tier])}" for tier in LIST_FILES)
            )
        return lists

    def load_data(self, networks: Iterable[str]) -> RegistryData:
        """
        Load the static data tables for each network.

        Raises:
            DataError: If a data file has the wrong shape
        """
        networks = list(networks)
        overrides = self._load_document(self.data, METADATA_FILE, required=False)
        colors = self._load_document(self.data, COLOR_FILE, required=False)
        precision = self._load_document(self.data, PRECISION_FILE, required=False)
        coingecko = self._load_document(self.data, COINGECKO_FILE, required=False)

        palette = colors.get(PALETTE_KEY, [])
        _require(
            isinstance(palette, list) and all(isinstance(c, str) for c in palette),
            f"{COLOR_FILE}: '{PALETTE_KEY}' must be an array of strings",
        )

        data = RegistryData(palette=list(palette))
        for network in networks:
            data.metadata_overrides[network] = _address_table(
                _network_section(overrides, network, dict, METADATA_FILE),
                METADATA_FILE, lambda v: isinstance(v, dict), "object",
            )
            data.color_overrides[network] = _address_table(
                _network_section(colors, network, dict, COLOR_FILE),
                COLOR_FILE, lambda v: isinstance(v, str), "string",
            )
            data.precision[network] = _address_table(
                _network_section(precision, network, dict, PRECISION_FILE),
                PRECISION_FILE, _is_precision, "non-negative integer",
            )
            data.coingecko_ids[network] = _address_table(
                _network_section(coingecko, network, dict, COINGECKO_FILE),
                COINGECKO_FILE, lambda v: isinstance(v, str), "string",
            )
        return data

