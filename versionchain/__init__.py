"""versionchain - version-chain storage for text documents."""

__version__ = "1.0.0"
