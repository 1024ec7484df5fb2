#!/usr/bin/env python3
"""
Command-line interface for the token registry builder.

Usage:
    python -m tokenregistry build
    python -m tokenregistry build --networks bsc --output-dir /tmp/generated
    python -m tokenregistry build --tolerant
    python -m tokenregistry coingecko-ids
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tokenregistry.batchers import BatchError
from tokenregistry.config import ConfigError, ConfigManager
from tokenregistry.core.storage import StorageError
from tokenregistry.fetchers import FetchError
from tokenregistry.registry import RegistryError
from tokenregistry.registry.builder import RegistryBuilder

logger = logging.getLogger(__name__)

FATAL_ERRORS = (ConfigError, RegistryError, BatchError, FetchError, StorageError)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokenregistry",
        description="Build the curated token registry and token lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build every active network into <root>/generated
  python -m tokenregistry build

  # Build a single network into a custom directory
  python -m tokenregistry build --networks bsc --output-dir /tmp/generated

  # Report merged tokens without a CoinGecko id
  python -m tokenregistry coingecko-ids
        """,
    )
    parser.add_argument("--root", type=Path, help="Registry root (default: REGISTRY_ROOT or cwd)")
    parser.add_argument(
        "--networks",
        help="Comma-separated networks to process (default: ACTIVE_NETWORKS)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Generate registries and token lists")
    build.add_argument("--output-dir", type=Path, help="Output directory (default: OUTPUT_DIR)")
    build.add_argument(
        "--tolerant",
        action="store_true",
        help="Drop tokens whose metadata calls fail instead of aborting",
    )

    subparsers.add_parser("coingecko-ids", help="Look up missing CoinGecko ids (read-only)")
    return parser


def apply_overrides(config: ConfigManager, args: argparse.Namespace) -> ConfigManager:
    """Apply command-line overrides on top of the environment configuration."""
    if args.root is not None:
        config.registry.REGISTRY_ROOT = args.root
    if args.networks:
        config.chains.ACTIVE_NETWORKS = [n.strip() for n in args.networks.split(",") if n.strip()]
    if getattr(args, "output_dir", None) is not None:
        config.registry.OUTPUT_DIR = args.output_dir
    if getattr(args, "tolerant", False):
        config.registry.MULTICALL_MODE = "tolerant"
    config.validate_configuration()
    return config


async def run_build(config: ConfigManager) -> int:
    builder = RegistryBuilder(config)
    result = await builder.run()
    logger.info(f"Generated {len(result.paths)} files in {config.registry.output_dir}")
    return 0


def run_coingecko_ids(config: ConfigManager) -> int:
    builder = RegistryBuilder(config)
    report = builder.find_missing_coingecko_ids()
    missing = sum(1 for ids in report.values() for coin_id in ids.values() if not coin_id)
    logger.info(f"{missing} tokens still without a CoinGecko id")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_overrides(ConfigManager(), args)
        if args.command == "build":
            return asyncio.run(run_build(config))
        return run_coingecko_ids(config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except FATAL_ERRORS as e:
        logger.error(f"Registry build failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
