import pytest
import yaml

from recovery.config.registry import Registry, deep_merge, load_config, load_registry
from recovery.config.validation import check_rules, validate_config
from recovery.errors import ConfigurationError, UnknownEnvironment


@pytest.fixture(autouse=True)
def no_override(monkeypatch):
    monkeypatch.delenv('ROLLBACK_CONFIG', raising=False)


def test_packaged_registry_is_valid():
    config = load_config()

    is_valid, errors = validate_config(config)

    assert is_valid, errors
    assert set(config['environments']) == {'staging', 'production'}


def test_resolve_returns_frozen_environment():
    registry = load_registry()

    staging = registry.resolve('staging')

    assert staging.name == 'staging'
    assert staging.database_component in staging.data_stores
    with pytest.raises(AttributeError):
        staging.app_name = 'other'
    with pytest.raises(TypeError):
        staging.data_stores['database'] = 'other'


def test_resolve_unknown_environment():
    registry = load_registry()

    with pytest.raises(UnknownEnvironment) as excinfo:
        registry.resolve('qa')

    assert excinfo.value.name == 'qa'
    assert 'production' in str(excinfo.value)


def test_override_file_is_merged(tmp_path):
    override = tmp_path / 'override.yaml'
    override.write_text(yaml.safe_dump({
        'environments': {'staging': {'app_name': 'app-academic-staging-blue'}},
        'rollback': {'health_check': {'max_attempts': 3}},
    }))

    registry = Registry(load_config(str(override)))

    assert registry.resolve('staging').app_name == 'app-academic-staging-blue'
    assert registry.resolve('staging').resource_group == 'rg-academic-staging-westeurope'
    assert registry.settings['health_check'] == {'max_attempts': 3, 'interval_seconds': 10, 'request_timeout': 30}


def test_override_from_environment_variable(tmp_path, monkeypatch):
    override = tmp_path / 'override.yaml'
    override.write_text(yaml.safe_dump({'rollback': {'backup_dir': '/var/backups/rollback'}}))
    monkeypatch.setenv('ROLLBACK_CONFIG', str(override))

    assert load_registry().settings['backup_dir'] == '/var/backups/rollback'


def test_missing_override_file(tmp_path):
    with pytest.raises(ConfigurationError, match='not found'):
        load_config(str(tmp_path / 'missing.yaml'))


def test_schema_violation_is_a_configuration_error(tmp_path):
    override = tmp_path / 'override.yaml'
    override.write_text(yaml.safe_dump({'environments': {'staging': {'health_url': 'not-a-url'}}}))

    with pytest.raises(ConfigurationError, match='health_url'):
        load_config(str(override))


def test_rules_reject_shared_resource_group():
    config = load_config()
    config['environments']['production']['resource_group'] = config['environments']['staging']['resource_group']

    errors = check_rules(config)

    assert any('share resource_group' in error for error in errors)


def test_rules_require_database_component_in_data_stores():
    config = load_config()
    config['environments']['staging']['database_component'] = 'sql'

    is_valid, errors = validate_config(config)

    assert not is_valid
    assert "database_component 'sql'" in errors[0]


def test_rules_require_bucket_for_s3():
    config = load_config()
    config['storage'] = {'backend': 's3', 's3': {}}

    assert "bucket_name is not set" in check_rules(config)[0]


def test_deep_merge_keeps_base_untouched():
    base = {'a': {'b': 1, 'c': 2}}

    merged = deep_merge(base, {'a': {'c': 3}})

    assert merged == {'a': {'b': 1, 'c': 3}}
    assert base == {'a': {'b': 1, 'c': 2}}
