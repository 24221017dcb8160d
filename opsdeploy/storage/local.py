#!/usr/bin/env python3
"""
Local artifact store for mock/development mode.
Buckets are directories under a root; keys are relative paths inside them.
"""

from pathlib import Path

from .base import StorageBackend


class LocalStorage(StorageBackend):
    """Filesystem-backed artifact store."""

    def __init__(self, config):
        self.root = Path(config.get('root', './artifact-store'))

    def _path(self, bucket, key):
        return self.root / bucket / key

    def put_object(self, bucket, key, body):
        path = self._path(bucket, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(body, str):
            body = body.encode('utf-8')
        path.write_bytes(body)
        return str(path)

    def get_object(self, bucket, key):
        path = self._path(bucket, key)
        if not path.is_file():
            return None
        return path.read_bytes()

    def url(self, bucket, key):
        return str(self._path(bucket, key))
