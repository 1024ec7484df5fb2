"""
Tests for the Multicall client and the ERC-20 metadata batcher.
"""

import pytest
from eth_abi import encode
from requests.exceptions import ConnectionError as RequestsConnectionError
from web3 import Web3

from conftest import BUSD, CAKE, MULTICALL, MULTICALL3, WBNB
from tokenregistry.batchers import (
    BatchConfig,
    ContractError,
    DecodeError,
    Multicall,
    NetworkError,
    TokenMetadataBatcher,
)
from tokenregistry.batchers.errors import BatchError, ErrorHandler, ValidationError
from tokenregistry.batchers.token_metadata import SELECTORS, decode_decimals, decode_text


class TestDecoders:
    """Decoding of individual ERC-20 return values."""

    def test_decode_decimals(self):
        assert decode_decimals(encode(["uint8"], [6])) == 6

    def test_decode_string(self):
        assert decode_text(encode(["string"], ["Wrapped BNB"])) == "Wrapped BNB"

    def test_decode_bytes32_fallback(self):
        raw = b"MKR".ljust(32, b"\x00")
        assert decode_text(raw) == "MKR"

    def test_decode_empty_data_fails(self):
        with pytest.raises(Exception):
            decode_text(b"")


class TestMulticall:
    """Aggregated call encoding and decoding."""

    def test_aggregate_preserves_request_order(self, fake_chain_factory, sample_tokens):
        chain, web3 = fake_chain_factory(sample_tokens)
        multicall = Multicall(web3, MULTICALL)

        block_number, results = multicall.aggregate(
            [(WBNB, SELECTORS["symbol"]), (CAKE, SELECTORS["symbol"])]
        )

        assert block_number == chain.block_number
        assert decode_text(results[0]) == "WBNB"
        assert decode_text(results[1]) == "Cake"
        assert len(chain.requests) == 1
        assert chain.requests[0]["to"] == Web3.to_checksum_address(MULTICALL)

    def test_aggregate_revert_raises_contract_error(self, fake_chain_factory, sample_tokens):
        _, web3 = fake_chain_factory(sample_tokens, reverting={CAKE})
        multicall = Multicall(web3, MULTICALL)

        with pytest.raises(ContractError):
            multicall.aggregate([(CAKE, SELECTORS["decimals"])])

    def test_try_aggregate_reports_failures(self, fake_chain_factory, sample_tokens):
        _, web3 = fake_chain_factory(sample_tokens, reverting={CAKE})
        multicall = Multicall(web3, MULTICALL3)

        results = multicall.try_aggregate(
            [(CAKE, SELECTORS["decimals"]), (BUSD, SELECTORS["decimals"])]
        )

        assert [r.success for r in results] == [False, True]
        assert decode_decimals(results[1].return_data) == 18

    def test_provider_failure_raises_network_error(self, fake_chain_factory):
        _, web3 = fake_chain_factory(error=RequestsConnectionError("Connection refused"))
        multicall = Multicall(web3, MULTICALL)

        with pytest.raises(NetworkError):
            multicall.aggregate([])


class TestTokenMetadataBatcher:
    """Token metadata resolution through one aggregated call."""

    @pytest.mark.asyncio
    async def test_single_round_trip(self, fake_chain_factory, sample_tokens):
        chain, web3 = fake_chain_factory(sample_tokens)
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([CAKE, BUSD, WBNB])

        assert result.success is True
        assert len(chain.requests) == 1
        assert chain.sub_call_count == 9
        assert result.data[CAKE] == {
            "decimals": 18,
            "symbol": "Cake",
            "name": "PancakeSwap Token",
        }
        assert result.data[WBNB]["symbol"] == "WBNB"
        assert result.block_number == chain.block_number

    @pytest.mark.asyncio
    async def test_duplicates_collapsed(self, fake_chain_factory, sample_tokens):
        chain, web3 = fake_chain_factory(sample_tokens)
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([CAKE, BUSD, CAKE, CAKE.lower()])

        assert result.success is True
        assert chain.sub_call_count == 6
        assert list(result.data) == [CAKE, BUSD]

    @pytest.mark.asyncio
    async def test_empty_input_makes_no_call(self, fake_chain_factory):
        chain, web3 = fake_chain_factory()
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([])

        assert result.success is True
        assert result.data == {}
        assert chain.requests == []

    @pytest.mark.asyncio
    async def test_strict_mode_fails_whole_batch(self, fake_chain_factory, sample_tokens):
        _, web3 = fake_chain_factory(sample_tokens, reverting={BUSD})
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([CAKE, BUSD, WBNB])

        assert result.success is False
        assert result.data == {}
        assert "reverted" in result.error

    @pytest.mark.asyncio
    async def test_strict_mode_decode_failure_fails_batch(self, fake_chain_factory, sample_tokens):
        tokens = dict(sample_tokens)
        tokens[BUSD] = {"decimals": 18, "symbol": b"", "name": "BUSD Token"}
        _, web3 = fake_chain_factory(tokens)
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([CAKE, BUSD])

        assert result.success is False
        assert "symbol()" in result.error

    @pytest.mark.asyncio
    async def test_bytes32_symbol(self, fake_chain_factory):
        tokens = {CAKE: {"decimals": 18, "symbol": b"CAKE".ljust(32, b"\x00"), "name": "Cake"}}
        _, web3 = fake_chain_factory(tokens)
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call([CAKE])

        assert result.data[CAKE]["symbol"] == "CAKE"

    @pytest.mark.asyncio
    async def test_tolerant_mode_reports_failed_tokens(self, fake_chain_factory, sample_tokens):
        chain, web3 = fake_chain_factory(sample_tokens, reverting={BUSD})
        batcher = TokenMetadataBatcher(
            web3, MULTICALL, BatchConfig(tolerant=True), multicall3_address=MULTICALL3
        )

        result = await batcher.batch_call([CAKE, BUSD, WBNB])

        assert result.success is True
        assert chain.requests[0]["to"] == Web3.to_checksum_address(MULTICALL3)
        assert set(result.data) == {CAKE, WBNB}
        assert list(result.failed) == [BUSD]
        assert result.failed_count == 1

    @pytest.mark.asyncio
    async def test_invalid_address_fails_batch(self, fake_chain_factory):
        chain, web3 = fake_chain_factory()
        batcher = TokenMetadataBatcher(web3, MULTICALL)

        result = await batcher.batch_call(["0x1234"])

        assert result.success is False
        assert "Invalid address" in result.error
        assert chain.requests == []


class TestErrorClassification:
    """ErrorHandler maps provider errors onto BatchError subclasses."""

    def test_wrap_errors(self):
        handler = ErrorHandler()

        assert isinstance(handler.wrap_error(Exception("read timed out"), "x"), NetworkError)
        assert isinstance(handler.wrap_error(Exception("429 Too Many Requests"), "x"), NetworkError)
        assert isinstance(handler.wrap_error(Exception("execution reverted"), "x"), ContractError)
        assert isinstance(handler.wrap_error(Exception("invalid params"), "x"), ValidationError)
        assert type(handler.wrap_error(Exception("boom"), "x")) is BatchError

    def test_wrap_passes_batch_errors_through(self):
        error = DecodeError("bad")

        assert ErrorHandler().wrap_error(error, "x") is error
