#!/usr/bin/env python3
"""
Per-run audit logging.

Every run gets its own timestamp-suffixed log file; the same lines are
echoed to the console.
"""

import logging
from datetime import datetime
from pathlib import Path

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
DATE_FORMAT = '%H:%M:%S'


def audit_log_path(log_dir, environment, now=None):
    """Return a log file path that no earlier run has used."""
    log_dir = Path(log_dir)
    stamp = (now or datetime.now()).strftime('%Y%m%d-%H%M%S')
    candidate = log_dir / f"rollback-{environment}-{stamp}.log"
    suffix = 1
    while candidate.exists():
        candidate = log_dir / f"rollback-{environment}-{stamp}-{suffix}.log"
        suffix += 1
    return candidate


def build_audit_logger(log_dir, environment, console=True, now=None):
    """Create a logger writing to a fresh audit file (and the console)."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = audit_log_path(log_dir, environment, now)

    logger = logging.getLogger(f"recovery.audit.{log_file.stem}")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    logger.log_file = log_file
    return logger


def close_audit_logger(logger):
    """Flush and detach the handlers created by build_audit_logger."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
