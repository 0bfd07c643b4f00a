#!/usr/bin/env python3
"""
Bounded health verification.
"""

import time

from ..errors import VerificationTimeout

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INTERVAL_SECONDS = 10


def wait_until_healthy(env, client, logger, max_attempts=DEFAULT_MAX_ATTEMPTS,
                       interval_seconds=DEFAULT_INTERVAL_SECONDS, sleep=time.sleep):
    """
    Poll the health probe until it reports Healthy.

    A probe error counts as a failed attempt. There is no sleep after the
    last attempt.

    Returns:
        The Healthy HealthCheckResult

    Raises:
        VerificationTimeout: budget exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    logger.info("Verifying health at %s (max %d attempts, %ss apart)",
                env.health_url, max_attempts, interval_seconds)

    last_status = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = client.health(env.health_url)
        except Exception as e:
            last_status = 'Unreachable'
            logger.warning("Health check %d/%d failed: %s", attempt, max_attempts, e)
        else:
            if result.is_healthy:
                logger.info("✓ Health check passed on attempt %d/%d", attempt, max_attempts)
                return result
            last_status = result.status.value
            logger.warning("Health check %d/%d: status %s", attempt, max_attempts, last_status)
            for name, entry in result.components.items():
                if entry.get('status') != 'Healthy':
                    logger.warning("  - %s: %s %s", name, entry.get('status'), entry.get('description') or '')

        if attempt < max_attempts:
            sleep(interval_seconds)

    raise VerificationTimeout(max_attempts, last_status)


def verify(env, client, logger, max_attempts=DEFAULT_MAX_ATTEMPTS,
           interval_seconds=DEFAULT_INTERVAL_SECONDS, sleep=time.sleep):
    """Boolean form of wait_until_healthy; logs the timeout instead of raising."""
    try:
        wait_until_healthy(env, client, logger, max_attempts, interval_seconds, sleep)
        return True
    except VerificationTimeout as e:
        logger.error("VerificationTimeout: %s", e)
        return False
