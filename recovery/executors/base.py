#!/usr/bin/env python3
"""
Base interface for the provisioning collaborator.
"""


class ProvisioningClient:
    """
    Interface to the cloud tooling that performs and inspects deployments.

    Action methods return the collaborator's exit code (0 means success).
    Read methods return parsed data and raise ProvisioningError when the
    call fails.
    """

    def redeploy(self, deployment_env_id):
        """Redeploy the last known-good package of an environment."""
        raise NotImplementedError("Subclasses must implement redeploy()")

    def restart(self, app_name, resource_group):
        raise NotImplementedError("Subclasses must implement restart()")

    def reprovision(self, deployment_env_id):
        """Force a re-provision of the environment's infrastructure."""
        raise NotImplementedError("Subclasses must implement reprovision()")

    def app_settings(self, app_name, resource_group):
        raise NotImplementedError("Subclasses must implement app_settings()")

    def deployment_descriptor(self, app_name, resource_group):
        raise NotImplementedError("Subclasses must implement deployment_descriptor()")

    def resource_state(self, resource_group):
        """Return the resource group's provisioning state, e.g. 'Succeeded'."""
        raise NotImplementedError("Subclasses must implement resource_state()")

    def app_state(self, app_name, resource_group):
        """Return the application's running state, e.g. 'Running'."""
        raise NotImplementedError("Subclasses must implement app_state()")

    def health(self, url):
        """Query the health probe and return a HealthCheckResult."""
        raise NotImplementedError("Subclasses must implement health()")
