"""
Application configuration using Pydantic settings.

Environment variables provide the defaults that persisted plugin
settings are merged over.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
