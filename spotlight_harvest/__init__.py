"""
Spotlight Harvest - background content harvester for the Spotlight Africa platform.

This package periodically crawls a fixed set of African business news sites,
extracts news and event candidates with declarative selector tables,
deduplicates them by a fingerprint of their link and creates each new item
exactly once in the shared content database.

Main entry point is the CLI via `spotlight-harvest run` command.

Example:
    $ spotlight-harvest run -c config.yaml
"""

__all__ = [
    "__version__",
    "fingerprint",
    "slugify",
    "normalize_item",
    "HarvestRunner",
    "HarvestWorker",
    "ContentWriter",
]
__version__ = "0.1.0"

from .core.fingerprint import fingerprint
from .core.normalize import normalize_item, slugify
from .runner import HarvestRunner
from .worker import HarvestWorker
from .writer import ContentWriter
