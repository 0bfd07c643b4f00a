#!/usr/bin/env python3
"""
Rollback strategies for the application, its database and its
infrastructure.

Each strategy returns True or False and never raises: collaborator
failures are logged as ExecutionFailure and turned into False.
"""

from ..errors import ExecutionFailure
from ..models import HealthStatus

NORMAL_RESOURCE_STATE = 'Succeeded'
NORMAL_APP_STATE = 'Running'


def _execution_failure(logger, message):
    logger.error("ExecutionFailure: %s", ExecutionFailure(message))
    return False


def _run_action(logger, label, action, *args):
    """Run a provisioning action; True when it exits 0."""
    logger.info("%s...", label)
    try:
        returncode = action(*args)
    except Exception as e:
        logger.warning("%s failed: %s", label, e)
        return False
    if returncode != 0:
        logger.warning("%s failed (exit %s)", label, returncode)
        return False
    logger.info("✓ %s succeeded", label)
    return True


def rollback_application(env, client, logger, verify_health):
    """
    Redeploy the last known-good package, falling back to a restart.

    Args:
        verify_health: zero-argument callable returning True once the
            application reports Healthy; it decides the final result
    """
    logger.info("=== APPLICATION ROLLBACK (%s) ===", env.app_name)

    recovered = _run_action(logger, f"Redeploying last known-good release ({env.deployment_env_id})",
                            client.redeploy, env.deployment_env_id)
    if not recovered:
        logger.warning("Falling back to application restart")
        recovered = _run_action(logger, f"Restarting {env.app_name}",
                                client.restart, env.app_name, env.resource_group)

    if not recovered:
        return _execution_failure(logger, f"redeploy and restart of {env.app_name} both failed")

    if not verify_health():
        logger.error("Application rollback did not restore a healthy state")
        return False

    logger.info("✓ Application rollback complete")
    return True


def rollback_database(env, client, logger):
    """
    Check the data store through the health probe. Read-only: a store
    that is not Healthy needs manual remediation.
    """
    component = env.database_component
    store = env.data_stores.get(component, component)
    logger.info("=== DATABASE ROLLBACK (%s) ===", store)

    try:
        result = client.health(env.health_url)
    except Exception as e:
        return _execution_failure(logger, f"database health query failed: {e}")

    status = result.component_status(component)
    if status is HealthStatus.HEALTHY:
        logger.info("✓ Data store '%s' reports Healthy", component)
        return True

    detail = result.components.get(component, {}).get('description') or 'no detail'
    logger.error("Data store '%s' reports %s (%s)", component, status.value, detail)
    logger.warning("Manual remediation required for %s; no automatic database changes are made", store)
    return _execution_failure(logger, f"data store '{component}' is {status.value}")


def infrastructure_is_normal(env, client, logger):
    """True when the resource group is provisioned and the app is running."""
    try:
        resource_state = client.resource_state(env.resource_group)
        app_state = client.app_state(env.app_name, env.resource_group)
    except Exception as e:
        logger.warning("Cannot read infrastructure state: %s", e)
        return False

    logger.info("Resource group state: %s, app state: %s", resource_state, app_state)
    return resource_state == NORMAL_RESOURCE_STATE and app_state == NORMAL_APP_STATE


def rollback_infrastructure(env, client, logger):
    """Re-provision the environment unless its infrastructure is already sound."""
    logger.info("=== INFRASTRUCTURE ROLLBACK (%s) ===", env.resource_group)

    if infrastructure_is_normal(env, client, logger):
        logger.info("✓ Infrastructure already in a normal state; nothing to re-provision")
        return True

    if _run_action(logger, f"Re-provisioning {env.deployment_env_id}",
                   client.reprovision, env.deployment_env_id):
        return True
    return _execution_failure(logger, f"re-provision of {env.deployment_env_id} failed")
