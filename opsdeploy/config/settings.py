#!/usr/bin/env python3
"""
Deployment configuration loading and validation.
- Default: config/deploy-config.yaml (or an explicit path)
- DEPLOYMENT_ENV=local: merges the sibling *.local.yaml overrides
"""

import copy
import os
from pathlib import Path

import jsonschema
import yaml

from ..errors import ConfigError


DEFAULT_CONFIG_PATH = Path("config") / "deploy-config.yaml"

DEFAULTS = {
    'deployment': {
        'storage_backend': 's3',
        'build_dir': 'berks-cookbooks',
        'cookbook_root': '.',
        'poll_interval': 2,
        'poll_timeout': None,
        'max_workers': 10,
    },
    'aws': {
        'region': 'us-east-1',
        'endpoint_url': None,
    },
    'local_store': {
        'root': './artifact-store',
    },
}

CONFIG_SCHEMA = {
    'type': 'object',
    'properties': {
        'deployment': {
            'type': 'object',
            'properties': {
                'storage_backend': {'enum': ['s3', 'local']},
                'build_dir': {'type': 'string', 'minLength': 1},
                'cookbook_root': {'type': 'string', 'minLength': 1},
                'poll_interval': {'type': 'number', 'exclusiveMinimum': 0},
                'poll_timeout': {'type': ['number', 'null'], 'exclusiveMinimum': 0},
                'max_workers': {'type': 'integer', 'minimum': 1},
            },
            'additionalProperties': False,
        },
        'aws': {
            'type': 'object',
            'properties': {
                'region': {'type': 'string'},
                'endpoint_url': {'type': ['string', 'null']},
                'profile': {'type': ['string', 'null']},
            },
            'additionalProperties': False,
        },
        'local_store': {
            'type': 'object',
            'properties': {
                'root': {'type': 'string', 'minLength': 1},
            },
            'additionalProperties': False,
        },
    },
    'additionalProperties': False,
}


def load_yaml(file_path):
    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {file_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{file_path} must contain a mapping at the top level")
    return data


def deep_merge(base, override):
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def local_override_path(config_path):
    config_path = Path(config_path)
    return config_path.with_name(f"{config_path.stem}.local{config_path.suffix}")


def validate_config(config):
    """Validate a merged config against CONFIG_SCHEMA and return it."""
    try:
        jsonschema.validate(instance=config, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        location = '.'.join(str(part) for part in e.absolute_path) or '<root>'
        raise ConfigError(f"Invalid configuration at '{location}': {e.message}") from e
    return config


def load_config(config_path=None):
    """
    Load configuration with optional local overrides.

    A missing default file is not an error (built-in defaults apply); a
    missing explicit path is.
    """
    explicit = config_path is not None
    config_path = Path(config_path) if explicit else DEFAULT_CONFIG_PATH
    config = copy.deepcopy(DEFAULTS)

    if config_path.exists():
        config = deep_merge(config, load_yaml(config_path))
    elif explicit:
        raise ConfigError(f"Configuration file not found: {config_path}")

    env = os.environ.get('DEPLOYMENT_ENV', '').strip()
    if env == 'local':
        override_path = local_override_path(config_path)
        if override_path.exists():
            config = deep_merge(config, load_yaml(override_path))

    return validate_config(config)
