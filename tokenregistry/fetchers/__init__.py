"""
Remote data fetchers: community icon allowlists and CoinGecko lookups.
"""

from .base import BaseFetcher, FetchResult, FetchError
from .assets import CommunityAllowlistFetcher, LocalAssetIndex
from .coingecko import CoingeckoFetcher

__all__ = [
    'BaseFetcher',
    'FetchResult',
    'FetchError',
    'CommunityAllowlistFetcher',
    'LocalAssetIndex',
    'CoingeckoFetcher',
]
