"""Asset collection core: configuration, logging, storage, lookups and scan results."""

__version__ = "0.1.0"