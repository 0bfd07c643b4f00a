#!/usr/bin/env python3
"""
Value types shared by the rollback components.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import UserCancelled


class RollbackType(str, Enum):
    APPLICATION = 'Application'
    DATABASE = 'Database'
    INFRASTRUCTURE = 'Infrastructure'
    EMERGENCY = 'Emergency'

    @classmethod
    def parse(cls, value):
        """Accept 'application', 'APPLICATION' or 'Application'."""
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise ValueError(f"Invalid rollback type: {value} (must be one of {', '.join(m.value for m in cls)})")


class HealthStatus(str, Enum):
    HEALTHY = 'Healthy'
    DEGRADED = 'Degraded'
    UNHEALTHY = 'Unhealthy'
    UNKNOWN = 'Unknown'

    @classmethod
    def parse(cls, value):
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class RollbackRequest:
    type: RollbackType
    environment: str
    force: bool = False


@dataclass(frozen=True)
class HealthCheckResult:
    """Snapshot of one health probe response."""

    status: HealthStatus
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_response(cls, body):
        """
        Build a result from the probe's JSON body.

        Expected shape:
            {"status": "Healthy", "results": {"database": {"status": "Healthy", ...}}}
        """
        if not isinstance(body, dict):
            return cls(status=HealthStatus.UNKNOWN)
        results = body.get('results') or {}
        components = {
            name: dict(entry) if isinstance(entry, dict) else {'status': str(entry)}
            for name, entry in results.items()
        }
        return cls(status=HealthStatus.parse(body.get('status', '')), components=components)

    @property
    def is_healthy(self):
        return self.status is HealthStatus.HEALTHY

    def component_status(self, name):
        entry = self.components.get(name)
        if entry is None:
            return HealthStatus.UNKNOWN
        return HealthStatus.parse(entry.get('status', ''))


@dataclass(frozen=True)
class BackupSnapshot:
    directory: Path
    app_settings: Any
    deployment_descriptor: Optional[Any] = None
    health_status: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RollbackOutcome:
    type: RollbackType
    succeeded: bool
    sub_outcomes: Tuple['RollbackOutcome', ...] = ()
    error: Optional[Exception] = None
    snapshot: Optional[BackupSnapshot] = None

    @property
    def cancelled(self):
        return isinstance(self.error, UserCancelled)

    @property
    def exit_code(self):
        return 0 if self.succeeded else 1
