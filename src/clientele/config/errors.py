"""Errors raised while assembling clientele settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A ``CLIENTELE_*`` setting is present but unusable (bad URL, non-positive timeout)."""


class MissingConfigurationError(ConfigurationError):
    """A setting the snapshot source needs is unset or blank."""
