"""
ppm exception classes.

This package provides the exception types raised by the ppm Python API.
Template problems are never raised; they are collected as issues.
"""

from ppm.exceptions.core import (
    ConfigError,
    ContextConsumedError,
    InternalConsistencyError,
    InvalidCommandNameError,
    PpmError,
    SpanError,
)

__all__ = [
    "PpmError",
    "ConfigError",
    "ContextConsumedError",
    "InternalConsistencyError",
    "InvalidCommandNameError",
    "SpanError",
]
