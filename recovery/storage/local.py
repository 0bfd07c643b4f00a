#!/usr/bin/env python3
"""
Local storage backend: snapshots stay in the backup directory.
"""

from .base import StorageBackend


class LocalStorage(StorageBackend):
    """Local storage backend (default)."""

    def upload_file(self, local_path, storage_key):
        """No-op for local mode - file already exists locally."""
        return str(local_path)
