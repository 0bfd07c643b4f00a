#!/usr/bin/env python3
"""
Rollback Orchestrator
Reverts the application, its database and its infrastructure to a
last-known-good state, one step at a time.
"""

import sys
import time
import argparse
import functools
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from ..audit import build_audit_logger, close_audit_logger
from ..config.registry import load_registry
from ..errors import BackupFailure, ConfigurationError, CriticalFailure, ExecutionFailure, UnknownEnvironment, UserCancelled
from ..executors import get_provisioning_client
from ..models import RollbackOutcome, RollbackRequest, RollbackType
from ..storage import get_storage_backend
from .confirmation import ConfirmationPort, ConsoleConfirmation, confirm
from .health import DEFAULT_INTERVAL_SECONDS, DEFAULT_MAX_ATTEMPTS, verify
from .snapshot import capture
from .strategies import rollback_application, rollback_database, rollback_infrastructure

EMERGENCY_SEQUENCE = (RollbackType.APPLICATION, RollbackType.DATABASE, RollbackType.INFRASTRUCTURE)


@dataclass
class RunContext:
    """Collaborators shared by every step of one run."""

    client: Any
    confirmation: ConfirmationPort
    logger: Any
    backup_root: Path
    storage: Optional[Any] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    sleep: Callable[[float], None] = time.sleep
    now: Callable[[], datetime] = field(default=datetime.now)

    def verifier(self, env):
        return functools.partial(
            verify, env, self.client, self.logger,
            max_attempts=self.max_attempts,
            interval_seconds=self.interval_seconds,
            sleep=self.sleep,
        )


def _print_phase(logger, title):
    logger.info("=" * 60)
    logger.info(title)
    logger.info("=" * 60)


def _describe(rollback_type, env):
    return f"{rollback_type.value} rollback of {env.name} ({env.app_name} in {env.resource_group})"


def _cancelled(rollback_type, logger):
    logger.warning("Rollback cancelled; no changes were made")
    return RollbackOutcome(rollback_type, False, error=UserCancelled("Operator declined the confirmation"))


def _take_snapshot(env, ctx):
    """Returns (snapshot, error)."""
    try:
        return capture(env, ctx.client, ctx.backup_root, ctx.logger, ctx.storage, ctx.now), None
    except BackupFailure as e:
        ctx.logger.error("BackupFailure: %s", e)
        ctx.logger.error("Rollback aborted before any change was made")
        return None, e


def _run_step(rollback_type, env, ctx):
    if rollback_type is RollbackType.APPLICATION:
        return rollback_application(env, ctx.client, ctx.logger, ctx.verifier(env))
    if rollback_type is RollbackType.DATABASE:
        return rollback_database(env, ctx.client, ctx.logger)
    return rollback_infrastructure(env, ctx.client, ctx.logger)


def run_rollback(request, env, ctx):
    """Run one rollback request and return its RollbackOutcome."""
    if request.type is RollbackType.EMERGENCY:
        return run_emergency(env, ctx, force=request.force)

    _print_phase(ctx.logger, f"{request.type.value.upper()} ROLLBACK ({env.name.upper()})")

    if not confirm(_describe(request.type, env), request.force, ctx.confirmation, ctx.logger):
        return _cancelled(request.type, ctx.logger)

    snapshot = None
    # Database rollback is read-only and needs no snapshot
    if request.type in (RollbackType.APPLICATION, RollbackType.INFRASTRUCTURE):
        snapshot, error = _take_snapshot(env, ctx)
        if error is not None:
            return RollbackOutcome(request.type, False, error=error)

    succeeded = _run_step(request.type, env, ctx)
    if succeeded and request.type is RollbackType.INFRASTRUCTURE:
        succeeded = ctx.verifier(env)()

    error = None if succeeded else ExecutionFailure(f"{request.type.value} rollback failed")
    return RollbackOutcome(request.type, succeeded, error=error, snapshot=snapshot)


def run_emergency(env, ctx, force=False):
    """
    Emergency rollback: application, database and infrastructure in that
    order, each attempted whatever the previous ones returned, then one
    final health check that alone decides the verdict.
    """
    _print_phase(ctx.logger, f"EMERGENCY ROLLBACK ({env.name.upper()})")

    description = f"EMERGENCY rollback of ALL components in {env.name} ({env.resource_group})"
    if not confirm(description, force, ctx.confirmation, ctx.logger):
        return _cancelled(RollbackType.EMERGENCY, ctx.logger)

    snapshot, error = _take_snapshot(env, ctx)
    if error is not None:
        return RollbackOutcome(RollbackType.EMERGENCY, False, error=error)

    sub_outcomes = []
    for step, rollback_type in enumerate(EMERGENCY_SEQUENCE, start=1):
        ctx.logger.info("--- Emergency step %d/%d: %s ---", step, len(EMERGENCY_SEQUENCE), rollback_type.value)
        succeeded = _run_step(rollback_type, env, ctx)
        sub_outcomes.append(RollbackOutcome(rollback_type, succeeded))

    ctx.logger.info("Emergency step results:")
    for outcome in sub_outcomes:
        ctx.logger.info("  %s %s", '✓' if outcome.succeeded else '✗', outcome.type.value)

    _print_phase(ctx.logger, "FINAL HEALTH VERIFICATION")
    if ctx.verifier(env)():
        ctx.logger.info("✓ EMERGENCY ROLLBACK COMPLETE - application healthy")
        return RollbackOutcome(RollbackType.EMERGENCY, True, tuple(sub_outcomes), snapshot=snapshot)

    failure = CriticalFailure(
        f"{env.app_name} is still unhealthy after emergency rollback; MANUAL INTERVENTION REQUIRED"
    )
    ctx.logger.critical("CriticalFailure: %s", failure)
    ctx.logger.critical("Backup evidence: %s", snapshot.directory)
    return RollbackOutcome(RollbackType.EMERGENCY, False, tuple(sub_outcomes), error=failure, snapshot=snapshot)


def _log_summary(outcome, logger):
    logger.info("=" * 60)
    if outcome.succeeded:
        logger.info("RESULT: %s rollback SUCCEEDED", outcome.type.value)
    elif outcome.cancelled:
        logger.warning("RESULT: %s rollback CANCELLED", outcome.type.value)
    else:
        logger.error("RESULT: %s rollback FAILED (%s: %s)",
                     outcome.type.value, type(outcome.error).__name__, outcome.error)
    logger.info("=" * 60)


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser():
    parser = argparse.ArgumentParser(
        prog='rollback',
        description='Roll back the application, database or infrastructure to the last known-good state',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Application rollback with confirmation prompt
  rollback --type Application --environment staging

  # Read-only database check
  rollback --type Database --environment production

  # Everything, no prompt (CI / incident runbooks)
  rollback --type Emergency --environment production --force
        """
    )
    parser.add_argument('--type', required=True, type=RollbackType.parse, dest='rollback_type',
                        metavar='{Application,Database,Infrastructure,Emergency}', help='Rollback type')
    parser.add_argument('--environment', required=True, help='Environment name (e.g., staging, production)')
    parser.add_argument('--force', action='store_true', help='Skip the confirmation prompt')
    parser.add_argument('--config', help='Registry override file (default: $ROLLBACK_CONFIG)')
    parser.add_argument('--backup-dir', help='Directory for pre-rollback snapshots')
    parser.add_argument('--log-dir', help='Directory for audit logs')
    parser.add_argument('--max-attempts', type=positive_int, help='Health check attempts')
    parser.add_argument('--interval', type=float, help='Seconds between health check attempts')
    return parser


def main(argv=None):
    """Main entry point - parse command line and run the rollback. Returns the exit code."""
    args = build_parser().parse_args(argv)

    try:
        registry = load_registry(args.config)
        env = registry.resolve(args.environment)
        storage = get_storage_backend(registry.storage)
    except (ConfigurationError, UnknownEnvironment) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    settings = registry.settings
    health = settings['health_check']
    logger = build_audit_logger(args.log_dir or settings['log_dir'], env.name)

    try:
        ctx = RunContext(
            client=get_provisioning_client(settings),
            confirmation=ConsoleConfirmation(settings['confirmation_token']),
            logger=logger,
            backup_root=Path(args.backup_dir or settings['backup_dir']),
            storage=storage,
            max_attempts=args.max_attempts or health['max_attempts'],
            interval_seconds=health['interval_seconds'] if args.interval is None else args.interval,
        )
        request = RollbackRequest(args.rollback_type, env.name, args.force)
        logger.info("Rollback requested: type=%s environment=%s force=%s",
                    request.type.value, request.environment, request.force)

        outcome = run_rollback(request, env, ctx)
        _log_summary(outcome, logger)
        logger.info("Audit log: %s", logger.log_file)
    finally:
        close_audit_logger(logger)

    return outcome.exit_code


if __name__ == '__main__':
    sys.exit(main())
