#!/usr/bin/env python3
"""S3 storage backend for snapshot retention."""

import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from .base import StorageBackend
from ..errors import StorageError


class S3Storage(StorageBackend):
    """Uploads snapshot files to an S3 bucket. Credentials come from the AWS default chain."""

    def __init__(self, config, client=None):
        self.bucket = config.get('bucket_name')
        self.region = config.get('region', 'us-east-1')
        self.endpoint_url = config.get('endpoint_url')
        self.prefix = config.get('prefix', 'rollback-snapshots/')
        self._client = client

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            self._client = boto3.client('s3', endpoint_url=self.endpoint_url, region_name=self.region)
        return self._client

    def _get_s3_url(self, storage_key):
        return f"s3://{self.bucket}/{storage_key}"

    def _full_key(self, storage_key):
        return f"{self.prefix}{storage_key}"

    def upload_file(self, local_path, storage_key):
        key = self._full_key(storage_key)
        try:
            self._get_client().upload_file(str(local_path), self.bucket, key)
        # upload_file wraps server rejections in S3UploadFailedError (a Boto3Error)
        except (Boto3Error, BotoCoreError, ClientError) as e:
            raise StorageError(f"S3 upload of {local_path} failed: {e}")
        return self._get_s3_url(key)
