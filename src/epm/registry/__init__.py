"""registry access and the in-memory content cache."""
from .client import RegistryClient
from .http import HttpRegistry
from .cache import ContentCache

__all__ = [
    "RegistryClient",
    "HttpRegistry",
    "ContentCache",
]
