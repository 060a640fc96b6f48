"""Configuration validation."""

from motionconv.validation.checks import merge, validate

__all__ = ["merge", "validate"]
