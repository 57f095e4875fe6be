"""Exception hierarchy for the harvester."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for harvester errors."""


class ConfigError(HarvestError):
    """Raised before the worker starts when configuration is unusable."""


class DomainNotAllowedError(HarvestError):
    """Raised when a URL falls outside a collector's allow-list."""

    def __init__(self, url: str, allowed: list[str]):
        super().__init__(f"{url} is not in allowed domains {allowed}")
        self.url = url
        self.allowed = allowed
