"""
Multicall batching of ERC-20 metadata reads.

Every token costs three sub-calls (decimals, symbol, name) inside a single
eth_call per network.
"""

from .base import BaseBatcher, BatchResult, BatchConfig
from .errors import BatchError, ContractError, DecodeError, NetworkError, ValidationError
from .multicall import CallResult, Multicall
from .token_metadata import TokenMetadataBatcher

__all__ = [
    'BaseBatcher',
    'BatchResult',
    'BatchConfig',
    'BatchError',
    'ContractError',
    'DecodeError',
    'NetworkError',
    'ValidationError',
    'CallResult',
    'Multicall',
    'TokenMetadataBatcher',
]
