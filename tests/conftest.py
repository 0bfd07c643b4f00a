import logging
from datetime import datetime

import pytest

from recovery.config.registry import EnvironmentConfig
from recovery.errors import ProvisioningError
from recovery.executors.base import ProvisioningClient
from recovery.models import HealthCheckResult
from recovery.rollback.confirmation import ConfirmationPort
from recovery.rollback.orchestrator import RunContext


def health_body(status='Healthy', **components):
    components = components or {'database': 'Healthy'}
    return {
        'status': status,
        'totalDuration': '00:00:00.0421',
        'results': {
            name: {'status': value, 'description': f"{name} is {value.lower()}", 'tags': []}
            for name, value in components.items()
        },
    }


def health_result(status='Healthy', **components):
    return HealthCheckResult.from_response(health_body(status, **components))


class FakeProvisioningClient(ProvisioningClient):
    """In-memory collaborator: records every call and returns scripted results."""

    def __init__(self, redeploy_rc=0, restart_rc=0, reprovision_rc=0,
                 settings=None, settings_error=None, descriptor=None, descriptor_error=None,
                 resource_state='Succeeded', app_state='Running', health=None):
        self.redeploy_rc = redeploy_rc
        self.restart_rc = restart_rc
        self.reprovision_rc = reprovision_rc
        self.settings = settings if settings is not None else [{'name': 'ASPNETCORE_ENVIRONMENT', 'value': 'Staging'}]
        self.settings_error = settings_error
        self.descriptor = descriptor if descriptor is not None else {'state': 'Running', 'kind': 'app,linux'}
        self.descriptor_error = descriptor_error
        self._resource_state = resource_state
        self._app_state = app_state
        self.health_script = list(health) if health is not None else [health_result()]
        self.calls = []

    def names(self):
        return [name for name, _ in self.calls]

    def redeploy(self, deployment_env_id):
        self.calls.append(('redeploy', (deployment_env_id,)))
        return self.redeploy_rc

    def restart(self, app_name, resource_group):
        self.calls.append(('restart', (app_name, resource_group)))
        return self.restart_rc

    def reprovision(self, deployment_env_id):
        self.calls.append(('reprovision', (deployment_env_id,)))
        return self.reprovision_rc

    def app_settings(self, app_name, resource_group):
        self.calls.append(('app_settings', (app_name, resource_group)))
        if self.settings_error:
            raise self.settings_error
        return self.settings

    def deployment_descriptor(self, app_name, resource_group):
        self.calls.append(('deployment_descriptor', (app_name, resource_group)))
        if self.descriptor_error:
            raise self.descriptor_error
        return self.descriptor

    def resource_state(self, resource_group):
        self.calls.append(('resource_state', (resource_group,)))
        return self._resource_state

    def app_state(self, app_name, resource_group):
        self.calls.append(('app_state', (app_name, resource_group)))
        return self._app_state

    def health(self, url):
        self.calls.append(('health', (url,)))
        response = self.health_script.pop(0) if len(self.health_script) > 1 else self.health_script[0]
        if isinstance(response, Exception):
            raise response
        return response


class StaticConfirmation(ConfirmationPort):
    def __init__(self, answer):
        self.answer = answer
        self.descriptions = []

    def confirm(self, description):
        self.descriptions.append(description)
        return self.answer


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def env():
    return EnvironmentConfig(
        name='staging',
        resource_group='rg-test-staging',
        app_name='app-test-staging',
        deployment_env_id='test-staging',
        health_url='https://app-test-staging.example.net/health',
        secret_store_name='kv-test-staging',
        data_stores={'database': 'sql-test-staging', 'event_store': 'cosmos-test-staging'},
    )


@pytest.fixture
def logger():
    log = logging.getLogger('recovery.tests')
    log.setLevel(logging.INFO)
    return log


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_ctx(tmp_path, logger, sleep):
    def factory(client, answer=True, storage=None, now=None):
        return RunContext(
            client=client,
            confirmation=StaticConfirmation(answer),
            logger=logger,
            backup_root=tmp_path / 'backups',
            storage=storage,
            max_attempts=5,
            interval_seconds=10,
            sleep=sleep,
            now=now or (lambda: datetime(2026, 10, 18, 9, 30, 0)),
        )
    return factory


@pytest.fixture
def unreachable():
    return ProvisioningError("Health probe failed (exit 7): Failed to connect")
