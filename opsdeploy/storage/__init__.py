"""
Artifact store package.

This package provides the storage backends (S3, local filesystem) that hold
published cookbook artifacts and their fingerprint records.
"""

from .base import StorageBackend
from .local import LocalStorage
from .s3 import S3Storage
from ..errors import ConfigError


def get_storage_backend(config):
    """Factory function to get appropriate storage backend."""
    storage_mode = config['deployment'].get('storage_backend', 's3')

    if storage_mode == 'local':
        return LocalStorage(config.get('local_store', {}))
    elif storage_mode == 's3':
        return S3Storage(config.get('aws', {}))
    else:
        raise ConfigError(f"Unknown storage backend: {storage_mode}")


__all__ = ['StorageBackend', 'LocalStorage', 'S3Storage', 'get_storage_backend']
