"""Host platform implementations used when running standalone."""

from .platform import InMemoryHostPlatform, JsonFileHostPlatform

__all__ = ["InMemoryHostPlatform", "JsonFileHostPlatform"]
