"""Exceptions raised by the registry pipeline."""


class RegistryError(Exception):
    """Base exception for registry assembly errors."""
    pass


class ChecksumError(RegistryError):
    """Raised when a curated list holds an address that is not checksummed."""

    def __init__(self, address: str, checksummed: str = None, network: str = None):
        if checksummed is None:
            message = f"Invalid address: {address}"
        else:
            message = f"Address not checksummed: {address} (should be {checksummed})"
        if network:
            message = f"[{network}] {message}"
        super().__init__(message)
        self.address = address
        self.checksummed = checksummed
        self.network = network


class MetadataError(RegistryError):
    """Raised when token metadata cannot be resolved for a network."""
    pass
