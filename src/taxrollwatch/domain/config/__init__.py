"""
Configuration domain package.

This package contains the domain layer for configuration management.
"""

from .settings import TrackerSettings

__all__ = [
    "TrackerSettings",
]
