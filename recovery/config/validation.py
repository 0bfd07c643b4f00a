#!/usr/bin/env python3
"""
Environment Registry Validation
Validates the registry table for schema compliance and cross-environment rules
"""

import sys
import json
import argparse
from pathlib import Path

import yaml
import jsonschema

SCHEMA_FILE = Path(__file__).parent / 'environments-schema.json'


def load_schema(schema_file=SCHEMA_FILE):
    with open(schema_file, 'r') as f:
        return json.load(f)


def validate_against_schema(config, schema_file=SCHEMA_FILE):
    """
    Validate the registry against the JSON schema.
    Returns (is_valid, errors_list)
    """
    if not schema_file.exists():
        return False, [f"Schema file not found: {schema_file}"]

    try:
        schema = load_schema(schema_file)
    except Exception as e:
        return False, [f"Error loading schema file: {e}"]

    try:
        jsonschema.validate(instance=config, schema=schema)
        return True, []
    except jsonschema.ValidationError as e:
        error_path = ' -> '.join(str(p) for p in e.path) if e.path else 'root'
        return False, [f"Schema validation failed at '{error_path}': {e.message}"]
    except jsonschema.SchemaError as e:
        return False, [f"Schema file is invalid: {e.message}"]


def check_rules(config):
    """Apply cross-environment rules. Returns list of errors."""
    errors = []
    environments = config.get('environments', {})

    # RULE 1: environments never share a resource group or app
    for field in ('resource_group', 'app_name', 'deployment_env_id'):
        seen = {}
        for name, env in environments.items():
            value = env.get(field)
            if value in seen:
                errors.append(f"Environments '{seen[value]}' and '{name}' share {field} '{value}'")
            else:
                seen[value] = name

    # RULE 2: the database component must name a configured data store
    for name, env in environments.items():
        component = env.get('database_component', 'database')
        if component not in env.get('data_stores', {}):
            errors.append(f"Environment '{name}': database_component '{component}' is not listed in data_stores")

    # RULE 3: S3 retention needs a bucket
    storage = config.get('storage', {})
    if storage.get('backend') == 's3' and not storage.get('s3', {}).get('bucket_name'):
        errors.append("storage.backend is 's3' but storage.s3.bucket_name is not set")

    return errors


def validate_config(config):
    """
    Validate a loaded registry dict.
    Uses JSON schema validation + cross-environment rules.
    """
    if not config:
        return False, ["Configuration is empty"]

    is_valid, schema_errors = validate_against_schema(config)
    if not is_valid:
        return False, schema_errors

    errors = check_rules(config)
    return len(errors) == 0, errors


def main():
    """Validation entry point."""
    from .registry import load_config
    from ..errors import ConfigurationError

    parser = argparse.ArgumentParser(description='Validate the rollback environment registry')
    parser.add_argument('--file', help='Override file to merge over the packaged registry')
    args = parser.parse_args()

    print("\n=== REGISTRY VALIDATION (JSON Schema + Rules) ===")
    if args.file:
        print(f"Override: {args.file}")
    print()

    try:
        config = load_config(args.file, validate=False)
    except (ConfigurationError, yaml.YAMLError) as e:
        print(f"[FAILED] {e}")
        sys.exit(1)

    is_valid, errors = validate_config(config)
    if is_valid:
        print("[OK] Registry is valid")
        print(f"  - Environments: {', '.join(sorted(config['environments']))}")
    else:
        print("[FAILED] Registry validation failed")
        for error in errors:
            print(f"  - {error}")

    print(f"\n=== RESULT: {'PASSED' if is_valid else f'FAILED ({len(errors)} errors)'} ===\n")
    sys.exit(0 if is_valid else 1)


if __name__ == '__main__':
    main()
