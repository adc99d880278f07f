"""Converter exception hierarchy.

Row-level data problems are logged and skipped, never raised.
These errors mark run-aborting failures at subsystem boundaries.
"""

from __future__ import annotations


class FlyExpressionError(Exception):
    """Base exception for all converter failures."""


class FlyExpressionConfigError(FlyExpressionError):
    """Raised for invalid runtime configuration."""


class FlyExpressionSourceError(FlyExpressionError):
    """Raised when an input source cannot be opened or read."""


class FlyExpressionStoreError(FlyExpressionError):
    """Raised when the item sink rejects or fails a write."""


class FlyExpressionSpecError(FlyExpressionError):
    """Raised for invalid or unsupported conversion-spec files."""
