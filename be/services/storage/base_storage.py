# services/storage/base_storage.py
from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised by a backend when the underlying store rejects an operation."""


class BaseStorage(ABC):
    @abstractmethod
    def put(self, key, data, content_type=None):
        """Store bytes under key, overwriting nothing the caller cares about."""
        pass

    @abstractmethod
    def read(self, key):
        """Return stored bytes, or None if the key does not exist."""
        pass

    @abstractmethod
    def get_public_url(self, key):
        """Return an unauthenticated URL that serves the bytes of key."""
        pass

    @abstractmethod
    def remove(self, keys):
        """Remove every key in keys. Missing keys are not an error."""
        pass

    @abstractmethod
    def list_keys(self):
        pass
