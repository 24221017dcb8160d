#!/usr/bin/env python3
"""
Cookbook discovery, source parsing and packaging.

Any directory holding a Berksfile is treated as a cookbook. Packaging vendors
its dependencies with Berkshelf into a shared working directory and zips the
result, so builds must run one at a time.
"""

import json
import os
import re
import shutil
import subprocess
import zipfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from .errors import CookbookBuildError


MARKER_FILE = 'Berksfile'
FINGERPRINT_SUFFIX = '_SHA.txt'
SUPERMARKET_URL = 'https://supermarket.chef.io'
S3_SOURCE_TYPE = 's3'

_METADATA_NAME = re.compile(r"""^\s*name\s*\(?\s*['"]([^'"]+)['"]""", re.MULTILINE)


@dataclass(frozen=True)
class LocalCookbook:
    name: str
    path: str


def parse_cookbook_source(url):
    """
    Split an S3 cookbook source URL into (bucket, artifact_key, fingerprint_key).

    Path-style URLs carry the bucket as the first path segment; s3:// and
    virtual-hosted URLs carry it in the host.
    """
    parsed = urlparse(url)
    host = parsed.netloc
    path = parsed.path.lstrip('/')

    if parsed.scheme == 's3':
        bucket, key = host, path
    elif '.s3' in host and not host.startswith('s3'):
        bucket, key = host.split('.s3', 1)[0], path
    else:
        if '/' not in path:
            raise ValueError(f"Cookbook source URL has no object key: {url}")
        bucket, key = path.split('/', 1)

    if not bucket or not key:
        raise ValueError(f"Cookbook source URL must name a bucket and a key: {url}")

    stem, _ext = os.path.splitext(key)
    return bucket, key, stem + FINGERPRINT_SUFFIX


def read_cookbook_name(cookbook_dir):
    """Read the declared name from metadata.json, falling back to metadata.rb."""
    cookbook_dir = Path(cookbook_dir)
    metadata_json = cookbook_dir / 'metadata.json'
    if metadata_json.is_file():
        with open(metadata_json, 'r') as f:
            name = json.load(f).get('name')
        if name:
            return name

    metadata_rb = cookbook_dir / 'metadata.rb'
    if metadata_rb.is_file():
        match = _METADATA_NAME.search(metadata_rb.read_text())
        if match:
            return match.group(1)
    return None


def discover_cookbooks(root, ignore=()):
    """Find every cookbook (Berksfile + readable name) below root, sorted by path."""
    root = Path(root)
    ignored = {Path(p).resolve() for p in ignore}
    found = []
    for marker in sorted(root.rglob(MARKER_FILE)):
        cookbook_dir = marker.parent
        if any(parent in ignored for parent in (cookbook_dir.resolve(), *cookbook_dir.resolve().parents)):
            continue
        name = read_cookbook_name(cookbook_dir)
        if name:
            found.append(LocalCookbook(name=name, path=str(cookbook_dir)))
    return found


def match_cookbooks(candidates, artifact_key):
    """
    Local cookbooks the artifact file name was built from.

    An exact name match wins, then the longest name followed by a '-<env>'
    suffix, then any name contained in the file name.
    """
    stem, _ext = os.path.splitext(os.path.basename(artifact_key))

    exact = [c for c in candidates if c.name == stem]
    if exact:
        return exact

    prefixed = [c for c in candidates if stem.startswith(c.name + '-')]
    if prefixed:
        longest = max(len(c.name) for c in prefixed)
        return [c for c in prefixed if len(c.name) == longest]

    return [c for c in candidates if c.name in stem]


class CookbookBuilder:
    """Vendors and zips cookbooks into artifacts named after their artifact file name."""

    def __init__(self, build_dir='berks-cookbooks', artifact_dir='.', berks='berks', runner=subprocess.run):
        self.build_dir = Path(build_dir)
        self.artifact_dir = Path(artifact_dir)
        self.berks = berks
        self.runner = runner

    def artifact_path(self, cookbook):
        return self.artifact_dir / Path(cookbook.artifact_key).name

    def vendor(self, cookbook):
        if self.build_dir.exists():
            shutil.rmtree(self.build_dir)

        berksfile = Path(cookbook.path) / MARKER_FILE
        cmd = [self.berks, 'vendor', str(self.build_dir), '--berksfile', str(berksfile)]
        try:
            result = self.runner(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise CookbookBuildError(cookbook, f"'{self.berks}' could not be executed ({e.strerror})") from e
        if result.returncode != 0:
            raise CookbookBuildError(cookbook, (result.stderr or result.stdout or '').strip() or f"exit {result.returncode}")

        self.build_dir.mkdir(parents=True, exist_ok=True)
        with open(self.build_dir / MARKER_FILE, 'w') as f:
            f.write(f"source \"{SUPERMARKET_URL}\"\n\n")
            f.write(f"cookbook \"{cookbook.name}\", path: \"./{cookbook.name}\"")

    def package(self, cookbook):
        archive_path = self.artifact_path(cookbook)
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, 'w', zipfile.ZIP_DEFLATED) as zipf:
            for file_path in sorted(self.build_dir.rglob('*')):
                if file_path.is_file():
                    zipf.write(file_path, arcname=str(file_path.relative_to(self.build_dir)))
        return archive_path

    def build(self, cookbook):
        """Vendor dependencies, pin the target cookbook and zip the working directory."""
        if not cookbook.buildable:
            raise CookbookBuildError(cookbook, "no local cookbook matches this artifact")
        self.vendor(cookbook)
        return self.package(cookbook)

    def cleanup(self, cookbooks):
        """Delete built artifacts and the shared working directory."""
        for cookbook in cookbooks:
            archive_path = self.artifact_path(cookbook)
            if archive_path.exists():
                archive_path.unlink()
        if self.build_dir.exists():
            shutil.rmtree(self.build_dir)
