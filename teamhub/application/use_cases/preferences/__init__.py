"""Use cases for managing notification preferences."""

from .service import PreferenceService

__all__ = ["PreferenceService"]
