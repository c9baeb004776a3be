"""Exception hierarchy for the plant catalog."""


class PlantCatalogError(Exception):
    """Base exception for all plant catalog errors."""


class RefreshError(PlantCatalogError):
    """Raised when fetching plants from the network or storing them locally fails."""


class NetworkServiceError(PlantCatalogError):
    """Raised when the remote plant service answers with an error status or bad payload."""


class CacheNotResolvedError(PlantCatalogError):
    """Raised when reading a cached value before its fetch has completed."""


__all__ = [
    "PlantCatalogError",
    "RefreshError",
    "NetworkServiceError",
    "CacheNotResolvedError",
]
