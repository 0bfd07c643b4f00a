import dataclasses

import pytest

from recovery.models import HealthCheckResult, HealthStatus, RollbackType


@pytest.mark.parametrize('value, expected', [
    ('Application', RollbackType.APPLICATION),
    ('database', RollbackType.DATABASE),
    ('INFRASTRUCTURE', RollbackType.INFRASTRUCTURE),
    (' emergency ', RollbackType.EMERGENCY),
])
def test_rollback_type_parse(value, expected):
    assert RollbackType.parse(value) is expected


def test_rollback_type_parse_rejects_unknown():
    with pytest.raises(ValueError):
        RollbackType.parse('Network')


def test_health_result_from_probe_body():
    result = HealthCheckResult.from_response({
        'status': 'Degraded',
        'results': {'keyvault': {'status': 'Degraded', 'description': 'slow'}},
    })

    assert result.status is HealthStatus.DEGRADED
    assert not result.is_healthy
    assert result.component_status('keyvault') is HealthStatus.DEGRADED
    assert result.component_status('servicebus') is HealthStatus.UNKNOWN


def test_health_result_tolerates_odd_bodies():
    assert HealthCheckResult.from_response(None).status is HealthStatus.UNKNOWN
    assert HealthCheckResult.from_response({'status': 'Exploded'}).status is HealthStatus.UNKNOWN


def test_health_result_keeps_only_parsed_fields():
    result = HealthCheckResult.from_response({'status': 'Healthy', 'totalDuration': '00:00:00.12', 'results': {}})

    assert [f.name for f in dataclasses.fields(result)] == ['status', 'components']
    assert result.components == {}
