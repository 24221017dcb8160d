#!/usr/bin/env python3
"""S3 artifact store for production mode."""

import boto3
from botocore.exceptions import ClientError

from .base import StorageBackend


MISSING_KEY_CODES = ('NoSuchKey', '404', 'NotFound')


class S3Storage(StorageBackend):
    """S3 artifact store backed by a boto3 client."""

    def __init__(self, config, client=None):
        self.region = config.get('region', 'us-east-1')
        self.endpoint_url = config.get('endpoint_url')
        self.profile = config.get('profile')
        self._client = client

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            session = boto3.session.Session(profile_name=self.profile, region_name=self.region)
            self._client = session.client('s3', endpoint_url=self.endpoint_url)
        return self._client

    def put_object(self, bucket, key, body):
        if isinstance(body, str):
            body = body.encode('utf-8')
        self._get_client().put_object(Bucket=bucket, Key=key, Body=body, ACL='private')
        return self.url(bucket, key)

    def get_object(self, bucket, key):
        try:
            response = self._get_client().get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in MISSING_KEY_CODES:
                return None
            raise
        return response['Body'].read()
