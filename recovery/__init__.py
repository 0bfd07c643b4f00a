"""
Rollback tooling for the academic management platform.

This package reverts the deployed API service, its data stores and its
infrastructure to a last-known-good state.
"""

__version__ = '1.0.0'
