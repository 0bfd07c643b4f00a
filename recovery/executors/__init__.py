#!/usr/bin/env python3
"""
Provisioning client factory and package exports.
"""

from .base import ProvisioningClient
from .azure_cli import AzureCliClient


def get_provisioning_client(settings):
    """
    Factory function to create the provisioning client.

    Args:
        settings: 'rollback' section of the registry config

    Returns:
        AzureCliClient instance
    """
    health = settings.get('health_check', {})
    return AzureCliClient(request_timeout=health.get('request_timeout', 30))


# Package exports
__all__ = ['ProvisioningClient', 'AzureCliClient', 'get_provisioning_client']
