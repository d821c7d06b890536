"""
CLI layer for retrykit.

Entry point::

    retrykit --help
"""

from retrykit.cli.app import app

__all__ = ["app"]
