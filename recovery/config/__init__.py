"""
Configuration package.

This package holds the environment registry table, its JSON schema, and
the modules that load and validate them.
"""

from .registry import EnvironmentConfig, Registry, load_config, load_registry

__all__ = ['EnvironmentConfig', 'Registry', 'load_config', 'load_registry', 'validation']
