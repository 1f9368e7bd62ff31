"""Exceptions raised by the evolution engine."""

from __future__ import annotations

__all__ = ["InvalidConfigurationError", "ConfigurationMissingError"]


class InvalidConfigurationError(ValueError):
    """Raised when a configuration is incomplete, inconsistent or locked."""


class ConfigurationMissingError(RuntimeError):
    """Raised when an operation needs a configuration that was never attached."""
