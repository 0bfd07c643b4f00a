#!/usr/bin/env python3
"""
Environment registry.

Loads the packaged environments.yaml once, merges an optional override
file over it, validates the result and exposes one immutable
EnvironmentConfig per environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

from ..errors import ConfigurationError, UnknownEnvironment
from .validation import validate_config

CONFIG_FILE = Path(__file__).parent / 'environments.yaml'
OVERRIDE_ENV_VAR = 'ROLLBACK_CONFIG'

DEFAULT_ROLLBACK_SETTINGS = {
    'backup_dir': './rollback-backups',
    'log_dir': './rollback-logs',
    'confirmation_token': 'ROLLBACK',
    'health_check': {
        'max_attempts': 5,
        'interval_seconds': 10,
        'request_timeout': 30,
    },
}


def load_yaml(file_path):
    with open(file_path, 'r') as f:
        return yaml.safe_load(f)


def deep_merge(base, override):
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(override_path=None, validate=True):
    """
    Load the registry with optional overrides.
    - Default: packaged environments.yaml
    - override_path or ROLLBACK_CONFIG: merged over the default
    """
    try:
        config = load_yaml(CONFIG_FILE) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read {CONFIG_FILE}: {e}")

    override_path = override_path or os.environ.get(OVERRIDE_ENV_VAR, '').strip() or None
    if override_path:
        path = Path(override_path)
        if not path.exists():
            raise ConfigurationError(f"Override file not found: {path}")
        try:
            override = load_yaml(path) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML syntax error in {path}: {e}")
        if not isinstance(override, dict):
            raise ConfigurationError(f"Override file {path} must contain a mapping")
        config = deep_merge(config, override)

    config['rollback'] = deep_merge(DEFAULT_ROLLBACK_SETTINGS, config.get('rollback') or {})

    if validate:
        is_valid, errors = validate_config(config)
        if not is_valid:
            raise ConfigurationError("Invalid environment registry:\n  - " + "\n  - ".join(errors))

    return config


@dataclass(frozen=True)
class EnvironmentConfig:
    name: str
    resource_group: str
    app_name: str
    deployment_env_id: str
    health_url: str
    secret_store_name: str
    data_stores: Mapping[str, str] = field(default_factory=dict)
    database_component: str = 'database'

    @classmethod
    def from_dict(cls, name, data):
        return cls(
            name=name,
            resource_group=data['resource_group'],
            app_name=data['app_name'],
            deployment_env_id=data['deployment_env_id'],
            health_url=data['health_url'],
            secret_store_name=data['secret_store_name'],
            data_stores=MappingProxyType(dict(data.get('data_stores', {}))),
            database_component=data.get('database_component', 'database'),
        )


class Registry:
    """Lookup table from environment name to EnvironmentConfig."""

    def __init__(self, config):
        self._environments = {
            name: EnvironmentConfig.from_dict(name, data)
            for name, data in config['environments'].items()
        }
        self.settings = config.get('rollback', DEFAULT_ROLLBACK_SETTINGS)
        self.storage = config.get('storage', {'backend': 'local'})

    @property
    def names(self):
        return sorted(self._environments)

    def resolve(self, name):
        try:
            return self._environments[name]
        except KeyError:
            raise UnknownEnvironment(name, self.names) from None


def load_registry(override_path=None):
    return Registry(load_config(override_path))
