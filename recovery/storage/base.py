#!/usr/bin/env python3
"""
Base storage backend interface for rollback snapshots.
"""


class StorageBackend:
    """Base interface for storage backends."""

    def upload_file(self, local_path, storage_key):
        """Upload local file to storage. Returns its storage URL or path."""
        raise NotImplementedError
