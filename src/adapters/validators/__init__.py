"""Validator directory adapters."""

from .static import StaticValidatorDirectory

__all__ = ["StaticValidatorDirectory"]
