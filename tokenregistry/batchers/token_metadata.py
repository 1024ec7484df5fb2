"""
ERC-20 metadata batch fetcher.

Fetches decimals(), symbol() and name() for many tokens through a single
Multicall request. Call slots 3*i, 3*i+1 and 3*i+2 of the aggregated request
belong to token i.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple, Union

from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from .base import BaseBatcher, BatchConfig, BatchResult
from .errors import BatchError, DecodeError
from .multicall import Call, CallResult, Multicall

METADATA_FIELDS = ("decimals", "symbol", "name")

SELECTORS = {
    "decimals": function_signature_to_4byte_selector("decimals()"),
    "symbol": function_signature_to_4byte_selector("symbol()"),
    "name": function_signature_to_4byte_selector("name()"),
}


def decode_decimals(data: bytes) -> int:
    """Decode a decimals() return value."""
    (value,) = decode(["uint8"], data)
    return int(value)


def decode_text(data: bytes) -> str:
    """
    Decode a symbol()/name() return value.

    Falls back to the bytes32 encoding used by some early tokens.
    """
    try:
        (value,) = decode(["string"], data)
        return value
    except Exception:
        if len(data) != 32:
            raise
    return bytes(data).rstrip(b"\x00").decode("utf-8", errors="replace")


DECODERS = {
    "decimals": decode_decimals,
    "symbol": decode_text,
    "name": decode_text,
}


class TokenMetadataBatcher(BaseBatcher):
    """
    Batch fetcher for ERC-20 token metadata.

    In strict mode (default) the request goes through aggregate(), so one
    reverting token fails the whole batch. In tolerant mode tryAggregate() is
    used and failing tokens are reported in BatchResult.failed.
    """

    def __init__(
        self,
        web3: Web3,
        multicall_address: str,
        config: Optional[BatchConfig] = None,
        multicall3_address: Optional[str] = None,
    ):
        """
        Initialize the metadata batcher.

        Args:
            web3: Web3 instance
            multicall_address: Multicall contract used in strict mode
            config: Batch configuration
            multicall3_address: tryAggregate-capable contract used in tolerant mode
        """
        super().__init__(web3, config)
        if self.config.tolerant:
            multicall_address = multicall3_address or multicall_address
        self.multicall = Multicall(web3, multicall_address)

    async def batch_call(
        self,
        token_addresses: List[str],
        block_identifier: Union[int, str] = "latest",
    ) -> BatchResult:
        """
        Fetch decimals/symbol/name for multiple tokens.

        Args:
            token_addresses: Token contract addresses; repeats are collapsed
            block_identifier: Block to call at

        Returns:
            BatchResult mapping checksummed address -> {decimals, symbol, name}
        """
        try:
            tokens = self._validate_addresses(token_addresses)
            if not tokens:
                return BatchResult(success=True, data={})

            calls = self._build_calls(tokens)
            self.logger.info(
                f"Fetching metadata for {len(tokens)} tokens ({len(calls)} calls) "
                f"via {self.multicall.address}"
            )

            block_number = None
            if self.config.tolerant:
                results = self.multicall.try_aggregate(calls, block_identifier)
            else:
                block_number, return_data = self.multicall.aggregate(calls, block_identifier)
                results = [CallResult(success=True, return_data=data) for data in return_data]

            data, failed = self._decode_metadata_response(results, tokens)

            return BatchResult(
                success=True,
                data=data,
                block_number=block_number,
                timestamp=datetime.now(timezone.utc),
                failed=failed,
            )

        except BatchError as e:
            self.logger.error(f"Token metadata batch failed: {e}")
            return BatchResult(success=False, data={}, error=str(e))

    @staticmethod
    def _build_calls(tokens: Sequence[str]) -> List[Call]:
        calls = []
        for token in tokens:
            for field_name in METADATA_FIELDS:
                calls.append((token, SELECTORS[field_name]))
        return calls

    def _decode_metadata_response(
        self,
        results: Sequence[CallResult],
        tokens: Sequence[str],
    ) -> Tuple[Dict[str, Dict], Dict[str, str]]:
        """
        Decode aggregated results back into per-token metadata.

        Returns:
            (decoded metadata by address, failure reason by address)

        Raises:
            DecodeError: In strict mode, for any undecodable token result
        """
        decoded = {}
        failed = {}

        for i, token in enumerate(tokens):
            slots = results[len(METADATA_FIELDS) * i : len(METADATA_FIELDS) * (i + 1)]
            try:
                decoded[token] = self._decode_token(token, slots)
            except DecodeError as e:
                if not self.config.tolerant:
                    raise
                self.logger.warning(f"Skipping token {token}: {e}")
                failed[token] = str(e)

        return decoded, failed

    @staticmethod
    def _decode_token(token: str, slots: Sequence[CallResult]) -> Dict:
        metadata = {}
        for field_name, result in zip(METADATA_FIELDS, slots):
            if not result.success:
                raise DecodeError(f"{field_name}() reverted for {token}", token, field_name)
            try:
                metadata[field_name] = DECODERS[field_name](result.return_data)
            except Exception as e:
                raise DecodeError(
                    f"Cannot decode {field_name}() for {token}: {e}", token, field_name
                )
        return metadata
