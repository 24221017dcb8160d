#!/usr/bin/env python3
"""
Content fingerprints for cookbooks.

The local fingerprint is the latest git revision that touched the cookbook
directory. The remote fingerprint is the revision recorded next to the
published artifact, or '' when nothing has been published yet.
"""

import subprocess

from .errors import AnalysisError


class FingerprintStore:
    """Reads local fingerprints from git and remote ones from the artifact store."""

    def __init__(self, storage, reporter=None, git='git', runner=subprocess.run):
        self.storage = storage
        self.reporter = reporter
        self.git = git
        self.runner = runner

    def local_fingerprint(self, path):
        """
        Return the latest revision hash affecting path, or '' outside version control.

        git runs inside the cookbook directory so the cookbook's own checkout
        is used, wherever the process was started from.
        """
        try:
            result = self.runner(
                [self.git, 'log', '--pretty=%H', '-1', '--', '.'],
                cwd=str(path), capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise AnalysisError(f"'{self.git}' could not be executed in {path} ({e.strerror})") from e

        if result.returncode != 0:
            if self.reporter is not None:
                reason = (result.stderr or '').strip() or f"exit {result.returncode}"
                self.reporter.error(f"No git revision for {path}, cookbook will not be built: {reason}")
            return ''
        return result.stdout.strip()

    def remote_fingerprint(self, bucket, fingerprint_key):
        return self.storage.get_text(bucket, fingerprint_key, default='').strip()
