#!/usr/bin/env python3
"""
Error taxonomy for rollback runs.

Only ConfigurationError is allowed to end the process. Every other error
is handled by the component that detects it and turned into a boolean or
a RollbackOutcome.
"""


class RecoveryError(Exception):
    """Base class for all rollback errors."""


class ConfigurationError(RecoveryError):
    """Environment configuration is missing or malformed."""


class UnknownEnvironment(RecoveryError):
    """Requested environment is not in the registry."""

    def __init__(self, name, known=()):
        self.name = name
        self.known = tuple(known)
        hint = f" (expected one of: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown environment '{name}'{hint}")


class UserCancelled(RecoveryError):
    """Operator declined the confirmation gate."""


class BackupFailure(RecoveryError):
    """Pre-rollback state capture could not read the application settings."""


class ProvisioningError(RecoveryError):
    """A provisioning collaborator call failed or returned unreadable output."""


class ExecutionFailure(RecoveryError):
    """A rollback executor's action failed."""


class VerificationTimeout(RecoveryError):
    """Health probe never reported Healthy within the attempt budget."""

    def __init__(self, attempts, last_status=None):
        self.attempts = attempts
        self.last_status = last_status
        detail = f", last status: {last_status}" if last_status else ""
        super().__init__(f"Health check did not reach Healthy after {attempts} attempt(s){detail}")


class CriticalFailure(RecoveryError):
    """Emergency rollback finished but the application is still not healthy."""


class StorageError(RecoveryError):
    """Snapshot retention upload failed."""
