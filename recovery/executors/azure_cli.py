#!/usr/bin/env python3
"""
Provisioning client backed by the Azure CLI (az), the Azure Developer CLI
(azd) and curl.
"""

import json
import subprocess

from .base import ProvisioningClient
from ..errors import ProvisioningError
from ..models import HealthCheckResult


class AzureCliClient(ProvisioningClient):
    """Shells out to az/azd for every operation (blocking, one call at a time)."""

    def __init__(self, request_timeout=30, runner=subprocess.run):
        self.request_timeout = request_timeout
        self._runner = runner

    def _run(self, cmd):
        try:
            return self._runner(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ProvisioningError(f"Cannot execute {cmd[0]}: {e}")

    def _run_check(self, cmd, operation):
        """Run command and raise ProvisioningError if it fails."""
        result = self._run(cmd)
        if result.returncode != 0:
            raise ProvisioningError(f"{operation} failed (exit {result.returncode}): {result.stderr.strip()}")
        return result.stdout

    def _run_json(self, cmd, operation):
        stdout = self._run_check(cmd, operation)
        try:
            return json.loads(stdout)
        except ValueError as e:
            raise ProvisioningError(f"{operation} returned invalid JSON: {e}")

    def redeploy(self, deployment_env_id):
        return self._run(['azd', 'deploy', '--environment', deployment_env_id, '--no-prompt']).returncode

    def restart(self, app_name, resource_group):
        return self._run(['az', 'webapp', 'restart', '--name', app_name, '--resource-group', resource_group]).returncode

    def reprovision(self, deployment_env_id):
        return self._run(['azd', 'provision', '--environment', deployment_env_id, '--no-prompt']).returncode

    def app_settings(self, app_name, resource_group):
        return self._run_json(
            ['az', 'webapp', 'config', 'appsettings', 'list',
             '--name', app_name, '--resource-group', resource_group, '--output', 'json'],
            "Read app settings"
        )

    def deployment_descriptor(self, app_name, resource_group):
        return self._run_json(
            ['az', 'webapp', 'show', '--name', app_name, '--resource-group', resource_group, '--output', 'json'],
            "Read deployment descriptor"
        )

    def resource_state(self, resource_group):
        return self._run_check(
            ['az', 'group', 'show', '--name', resource_group,
             '--query', 'properties.provisioningState', '--output', 'tsv'],
            "Read resource group state"
        ).strip()

    def app_state(self, app_name, resource_group):
        return self._run_check(
            ['az', 'webapp', 'show', '--name', app_name, '--resource-group', resource_group,
             '--query', 'state', '--output', 'tsv'],
            "Read app state"
        ).strip()

    def health(self, url):
        # No --fail: an Unhealthy probe answers 503 with a JSON body we still need
        body = self._run_json(
            ['curl', '-sS', '--max-time', str(self.request_timeout), '--header', 'Accept: application/json', url],
            "Health probe"
        )
        return HealthCheckResult.from_response(body)
