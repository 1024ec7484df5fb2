"""
Shared pytest fixtures: an in-memory Multicall chain for token metadata reads,
network settings and on-disk registry trees.
"""

import json
from unittest.mock import Mock

import pytest
from eth_abi import decode, encode
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractLogicError

from tokenregistry.batchers.multicall import AGGREGATE_SELECTOR, TRY_AGGREGATE_SELECTOR
from tokenregistry.batchers.token_metadata import SELECTORS
from tokenregistry.config.chains import NetworkConfig

FIELDS_BY_SELECTOR = {selector: field for field, selector in SELECTORS.items()}


class FakeChain:
    """
    Answers eth.call() for a Multicall contract backed by a token table.

    tokens maps checksummed address -> {"decimals", "symbol", "name"}; a bytes
    value for symbol/name is returned raw (bytes32 style). Unknown tokens and
    addresses in `reverting` revert.
    """

    def __init__(self, tokens=None, reverting=(), error=None, block_number=1234):
        self.tokens = dict(tokens or {})
        self.reverting = set(reverting)
        self.error = error
        self.block_number = block_number
        self.requests = []

    def call(self, transaction, block_identifier="latest"):
        self.requests.append(transaction)
        if self.error is not None:
            raise self.error

        payload = bytes.fromhex(transaction["data"][2:])
        selector, body = payload[:4], payload[4:]

        if selector == AGGREGATE_SELECTOR:
            (calls,) = decode(["(address,bytes)[]"], body)
            return_data = []
            for target, data in calls:
                success, result = self._execute(target, data)
                if not success:
                    raise ContractLogicError("execution reverted: Multicall aggregate: call failed")
                return_data.append(result)
            return HexBytes(encode(["uint256", "bytes[]"], [self.block_number, return_data]))

        if selector == TRY_AGGREGATE_SELECTOR:
            _, calls = decode(["bool", "(address,bytes)[]"], body)
            results = [self._execute(target, data) for target, data in calls]
            return HexBytes(encode(["(bool,bytes)[]"], [results]))

        raise ContractLogicError("execution reverted")

    @property
    def sub_call_count(self):
        """Number of sub-calls carried by the last request."""
        payload = bytes.fromhex(self.requests[-1]["data"][2:])
        selector, body = payload[:4], payload[4:]
        if selector == AGGREGATE_SELECTOR:
            (calls,) = decode(["(address,bytes)[]"], body)
        else:
            _, calls = decode(["bool", "(address,bytes)[]"], body)
        return len(calls)

    def _execute(self, target, data):
        address = Web3.to_checksum_address(target)
        token = self.tokens.get(address)
        if token is None or address in self.reverting:
            return False, b""

        field = FIELDS_BY_SELECTOR[bytes(data)]
        value = token[field]
        if field == "decimals":
            return True, encode(["uint8"], [value])
        if isinstance(value, bytes):
            return True, value
        return True, encode(["string"], [value])


def make_web3(chain):
    web3 = Mock()
    web3.eth.call = Mock(side_effect=chain.call)
    return web3


@pytest.fixture
def fake_chain_factory():
    """Build a (FakeChain, mocked Web3) pair."""

    def _factory(tokens=None, reverting=(), error=None):
        chain = FakeChain(tokens, reverting=reverting, error=error)
        return chain, make_web3(chain)

    return _factory


# Checksummed token addresses used across the test suites
CAKE = "0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82"
BUSD = "0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56"
WBNB = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"
ZERO = "0x0000000000000000000000000000000000000000"


@pytest.fixture
def sample_tokens():
    """On-chain metadata for a handful of BSC tokens."""
    return {
        CAKE: {"decimals": 18, "symbol": "Cake", "name": "PancakeSwap Token"},
        BUSD: {"decimals": 18, "symbol": "BUSD", "name": "BUSD Token"},
        WBNB: {"decimals": 18, "symbol": "WBNB", "name": "Wrapped BNB"},
    }
MULTICALL = "0x7B23A56572cBC04035da7852a5427066EC2C2040"
MULTICALL3 = "0xcA11bde05977b3631167028862bE2a173976CA11"

PALETTE = ["#f0b90b", "#3c3c3d", "#2775ca", "#8247e5"]


@pytest.fixture
def bsc_network():
    """BSC network settings pointing at a local RPC."""
    return NetworkConfig(
        name="bsc",
        chain_id=56,
        rpc_url="http://localhost:8545",
        multicall_address=MULTICALL,
        multicall3_address=MULTICALL3,
        native_symbol="BNB",
        native_name="BNB",
        color_enabled=True,
        community_chain="smartchain",
        coingecko_platform="binance-smart-chain",
    )


@pytest.fixture
def registry_tree(tmp_path):
    """
    Write a registry root (lists/, data/, assets/) under tmp_path.

    Returns a function taking the list documents, the data documents and the
    local icons as {chain_id: [address, ...]}; it returns the root path.
    """

    def _write(lists, data=None, icons=None):
        root = tmp_path / "registry"
        for filename, document in lists.items():
            path = root / "lists" / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document))
        for filename, document in (data or {}).items():
            path = root / "data" / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document))
        for chain_id, addresses in (icons or {}).items():
            directory = root / "assets" / str(chain_id)
            directory.mkdir(parents=True, exist_ok=True)
            for address in addresses:
                (directory / f"{address}.png").write_bytes(b"\x89PNG")
        return root

    return _write
