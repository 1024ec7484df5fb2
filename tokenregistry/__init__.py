"""
Token registry builder.

Builds the dex/pm token registries and the listed/vetted token lists from the
curated address lists and on-chain ERC-20 metadata.
"""

__version__ = "1.0.0"
