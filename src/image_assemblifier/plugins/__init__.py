"""Engine plugin interfaces and registry."""

from .base import EnginePlugin
from .registry import EngineRegistry, create_default_registry

__all__ = ["EnginePlugin", "EngineRegistry", "create_default_registry"]
