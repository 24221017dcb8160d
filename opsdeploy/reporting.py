#!/usr/bin/env python3
"""
Console progress reporting.

A Reporter is passed to every component that talks to the user. Dispatch
tasks report from worker threads, so each write holds a lock.
"""

import sys
import threading


class Reporter:
    """Prints progress to stdout and errors to stderr."""

    def __init__(self, out=None, err=None):
        self.out = out
        self.err = err
        self._lock = threading.Lock()

    def _write(self, message, stream):
        with self._lock:
            print(message, file=stream or sys.stdout, flush=True)

    def info(self, message):
        self._write(message, self.out)

    def success(self, message):
        self._write(f"[OK] {message}", self.out)

    def error(self, message):
        self._write(f"ERROR: {message}", self.err or sys.stderr)

    def phase(self, title):
        self._write(f"\n{'=' * 60}\n{title}\n{'=' * 60}", self.out)
