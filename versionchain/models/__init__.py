"""Database models."""

from .document import Document
from .version import Version

__all__ = ["Document", "Version"]
