"""
Multicall aggregator client.

Encodes many (target, calldata) pairs into one call against a Multicall
contract and decodes the per-call results in request order.

    aggregate((address,bytes)[])                 -> (uint256 blockNumber, bytes[] returnData)
    tryAggregate(bool,(address,bytes)[])         -> ((bool success, bytes returnData)[])

aggregate() reverts as a whole when any sub-call reverts. tryAggregate(false, ...)
(Multicall2/Multicall3) reports each sub-call's success flag instead.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from .errors import DecodeError, ErrorHandler

logger = logging.getLogger(__name__)

AGGREGATE_SELECTOR = function_signature_to_4byte_selector("aggregate((address,bytes)[])")
TRY_AGGREGATE_SELECTOR = function_signature_to_4byte_selector(
    "tryAggregate(bool,(address,bytes)[])"
)

Call = Tuple[str, bytes]


@dataclass(frozen=True)
class CallResult:
    """Outcome of one sub-call inside an aggregated request."""

    success: bool
    return_data: bytes


class Multicall:
    """Thin client for a deployed Multicall contract."""

    def __init__(self, web3: Web3, address: str):
        self.web3 = web3
        self.address = Web3.to_checksum_address(address)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    def aggregate(
        self, calls: Sequence[Call], block_identifier: Union[int, str] = "latest"
    ) -> Tuple[int, List[bytes]]:
        """
        Execute all calls in one round trip; any failing sub-call fails the batch.

        Returns:
            (block number, return data per call in request order)
        """
        payload = AGGREGATE_SELECTOR + encode(
            ["(address,bytes)[]"], [self._normalize_calls(calls)]
        )
        raw = self._eth_call(payload, block_identifier, len(calls))

        try:
            block_number, return_data = decode(["uint256", "bytes[]"], raw)
        except Exception as e:
            raise DecodeError(f"Malformed aggregate response: {e}")

        if len(return_data) != len(calls):
            raise DecodeError(
                f"Aggregate returned {len(return_data)} results for {len(calls)} calls"
            )
        return block_number, list(return_data)

    def try_aggregate(
        self, calls: Sequence[Call], block_identifier: Union[int, str] = "latest"
    ) -> List[CallResult]:
        """Execute all calls in one round trip, reporting per-call success."""
        payload = TRY_AGGREGATE_SELECTOR + encode(
            ["bool", "(address,bytes)[]"], [False, self._normalize_calls(calls)]
        )
        raw = self._eth_call(payload, block_identifier, len(calls))

        try:
            (results,) = decode(["(bool,bytes)[]"], raw)
        except Exception as e:
            raise DecodeError(f"Malformed tryAggregate response: {e}")

        if len(results) != len(calls):
            raise DecodeError(
                f"tryAggregate returned {len(results)} results for {len(calls)} calls"
            )
        return [CallResult(success=success, return_data=data) for success, data in results]

    @staticmethod
    def _normalize_calls(calls: Sequence[Call]) -> List[Call]:
        return [(Web3.to_checksum_address(target), data) for target, data in calls]

    def _eth_call(self, payload: bytes, block_identifier: Union[int, str], call_count: int) -> bytes:
        self.logger.debug(f"Multicall {self.address}: {call_count} calls")
        try:
            return self.web3.eth.call(
                {"to": self.address, "data": "0x" + payload.hex()},
                block_identifier=block_identifier,
            )
        except Exception as e:
            self.error_handler.log_error(
                e, {"multicall": self.address, "call_count": call_count}
            )
            raise self.error_handler.wrap_error(e, "Multicall failed")
