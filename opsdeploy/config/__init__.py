"""
Configuration package.

Loads the YAML deployment config, merges local overrides and validates the
result against a JSON schema.
"""

from .settings import DEFAULTS, deep_merge, load_config, validate_config

__all__ = ['DEFAULTS', 'deep_merge', 'load_config', 'validate_config']
