#!/usr/bin/env python3
"""
Publishes built cookbook artifacts and their fingerprint records.
"""

from pathlib import Path

from .errors import PublishError


class ArtifactPublisher:
    """Uploads artifacts best-effort: failures are reported, never raised."""

    def __init__(self, storage, reporter):
        self.storage = storage
        self.reporter = reporter

    def publish(self, cookbook, artifact_path):
        """
        Upload the artifact, then the fingerprint record.

        The fingerprint record is written only after the artifact upload
        succeeds. Returns True on success.
        """
        try:
            body = Path(artifact_path).read_bytes()
            url = self.storage.put_object(cookbook.bucket, cookbook.artifact_key, body)
            self.storage.put_object(cookbook.bucket, cookbook.fingerprint_key, cookbook.local_fingerprint)
        except Exception as e:
            self.reporter.error(str(PublishError(cookbook, e)))
            return False

        self.reporter.success(f"Published cookbook [{cookbook.name}] to {url}")
        return True
