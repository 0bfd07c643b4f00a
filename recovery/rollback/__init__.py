"""
Rollback package.

This package contains the confirmation gate, state capture, health
verification, the rollback strategies and the orchestrator that
sequences them.
"""

__all__ = ['orchestrator', 'strategies', 'snapshot', 'health', 'confirmation']
