"""Multi-chain token balance indexer."""

__version__ = "0.1.0"
