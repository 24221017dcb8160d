#!/usr/bin/env python3
"""
Base artifact store interface for cookbook artifacts and fingerprint records.
"""


class StorageBackend:
    """Interface for artifact stores addressed by (bucket, key)."""

    def put_object(self, bucket, key, body):
        """Store body (bytes or str) at bucket/key as a private object."""
        raise NotImplementedError("Subclasses must implement put_object()")

    def get_object(self, bucket, key):
        """Return the object body as bytes, or None if the key does not exist."""
        raise NotImplementedError("Subclasses must implement get_object()")

    def get_text(self, bucket, key, default=''):
        body = self.get_object(bucket, key)
        if body is None:
            return default
        return body.decode('utf-8')

    def url(self, bucket, key):
        return f"s3://{bucket}/{key}"
