#!/usr/bin/env python3
"""
Pre-rollback state capture.

Writes the current app settings, deployment descriptor and health status
to a fresh timestamped directory before anything is changed. Snapshots
are audit evidence only; nothing reads them back.
"""

import json
from datetime import datetime
from pathlib import Path

from ..errors import BackupFailure, StorageError
from ..models import BackupSnapshot

SETTINGS_FILE = 'app-settings.json'
DESCRIPTOR_FILE = 'deployment-descriptor.json'
HEALTH_FILE = 'health-status.json'


def create_snapshot_directory(backup_root, environment, now=None):
    """Create and return a directory no earlier snapshot has used."""
    backup_root = Path(backup_root)
    backup_root.mkdir(parents=True, exist_ok=True)
    stamp = (now or datetime.now()).strftime('%Y%m%d-%H%M%S')
    base_name = f"{environment}-{stamp}"

    suffix = 0
    while True:
        name = base_name if suffix == 0 else f"{base_name}-{suffix}"
        directory = backup_root / name
        try:
            directory.mkdir()
            return directory
        except FileExistsError:
            suffix += 1


def _write_json(path, data):
    with open(path, 'w') as f:
        json.dump(data, f, indent=2, default=str)
    return path


def _health_to_dict(result):
    return {
        'status': result.status.value,
        'results': result.components,
    }


def _publish(files, directory, storage, logger):
    for path in files:
        try:
            location = storage.upload_file(path, f"{directory.name}/{path.name}")
            logger.info("  Retained: %s", location)
        except StorageError as e:
            logger.warning("Snapshot upload failed (local copy kept): %s", e)


def capture(env, client, backup_root, logger, storage=None, now=datetime.now):
    """
    Capture current state of an environment.

    Raises:
        BackupFailure: app settings could not be read or saved. The caller
        must not go on to change anything.
    """
    logger.info("Creating pre-rollback backup for %s...", env.name)

    try:
        settings = client.app_settings(env.app_name, env.resource_group)
    except Exception as e:
        raise BackupFailure(f"Cannot read app settings of {env.app_name}: {e}") from e

    try:
        directory = create_snapshot_directory(backup_root, env.name, now())
        written = [_write_json(directory / SETTINGS_FILE, settings)]
    except OSError as e:
        raise BackupFailure(f"Cannot write snapshot under {backup_root}: {e}") from e
    logger.info("  ✓ App settings saved")

    descriptor = None
    try:
        descriptor = client.deployment_descriptor(env.app_name, env.resource_group)
        written.append(_write_json(directory / DESCRIPTOR_FILE, descriptor))
        logger.info("  ✓ Deployment descriptor saved")
    except Exception as e:
        logger.warning("Deployment descriptor not captured: %s", e)

    health_status = None
    try:
        health_status = _health_to_dict(client.health(env.health_url))
        written.append(_write_json(directory / HEALTH_FILE, health_status))
        logger.info("  ✓ Health status saved (%s)", health_status['status'])
    except Exception as e:
        logger.warning("Health status not captured: %s", e)

    if storage is not None:
        _publish(written, directory, storage, logger)

    logger.info("Backup created: %s", directory)
    return BackupSnapshot(
        directory=directory,
        app_settings=settings,
        deployment_descriptor=descriptor,
        health_status=health_status,
    )
