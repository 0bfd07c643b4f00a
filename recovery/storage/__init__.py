"""
Storage backend abstraction package.

Rollback snapshots always land in the local backup directory; the s3
backend additionally uploads them for retention.
"""

from .local import LocalStorage
from .s3 import S3Storage
from ..errors import ConfigurationError


def get_storage_backend(storage_config):
    """Factory function to get appropriate storage backend."""
    storage_mode = (storage_config or {}).get('backend', 'local')

    if storage_mode == 'local':
        return LocalStorage()
    elif storage_mode == 's3':
        return S3Storage(storage_config.get('s3', {}))
    else:
        raise ConfigurationError(f"Unknown storage backend: {storage_mode}")


__all__ = ['LocalStorage', 'S3Storage', 'get_storage_backend']
