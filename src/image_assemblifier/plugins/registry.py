"""Engine registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from image_assemblifier.errors import PluginError
from image_assemblifier.plugins.base import EnginePlugin


class EngineRegistry:
    """Registry for conversion engines."""

    def __init__(self) -> None:
        self._engines: dict[str, EnginePlugin] = {}

    def register(self, engine: EnginePlugin) -> None:
        """Register engine instance by unique name.

        Raises
        ------
        PluginError
            If the engine has no name or no ``convert`` method.
        """
        name = getattr(engine, "name", "")
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise PluginError("Engine must define a non-empty 'name'.")
        if not callable(getattr(engine, "convert", None)):
            raise PluginError(f"Engine '{name}' must define a convert() method.")
        self._engines[name] = engine

    def names(self) -> list[str]:
        """Return registered engine names, sorted."""
        return sorted(self._engines.keys())

    def get(self, name: str) -> EnginePlugin:
        """Get engine by name.

        Raises
        ------
        PluginError
            If engine name is not registered.
        """
        try:
            return self._engines[name]
        except KeyError as exc:
            available = ", ".join(self.names()) or "<none>"
            raise PluginError(
                f"Unknown engine '{name}'. Available engines: {available}"
            ) from exc

    def resolve(self, name: str | None = None) -> EnginePlugin:
        """Resolve an engine explicitly, or the only registered one.

        Raises
        ------
        PluginError
            If no engine is registered, or several are and no name was given.
        """
        if name:
            return self.get(name)
        if not self._engines:
            raise PluginError(
                "No conversion engine is registered. "
                "Pass --engine-module or --engine-command."
            )
        if len(self._engines) > 1:
            raise PluginError(
                f"Multiple engines registered ({', '.join(self.names())}). "
                "Pass --engine explicitly."
            )
        return next(iter(self._engines.values()))

    def load_module(self, module_or_path: str) -> None:
        """Load engine providers from module name or file path.

        .. warning::
            This executes code from the specified module. Only load engines
            from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    .. warning::
        This function executes arbitrary Python code from the specified module
        or file. Only use it with explicit user intent (``--engine-module``).

    Raises
    ------
    PluginError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise PluginError(f"Unable to load engine module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise PluginError(
                f"Unable to execute engine module {candidate}: {exc}"
            ) from exc
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise PluginError(
            f"Unable to import engine module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: EngineRegistry) -> None:
    """Register engine definitions found in module."""
    if hasattr(module, "register_engines"):
        module.register_engines(registry)
        return

    engines_obj = getattr(module, "ENGINES", None)
    if engines_obj is not None:
        for engine in engines_obj:
            registry.register(engine)
        return

    engine_obj = getattr(module, "ENGINE", None)
    if engine_obj is not None:
        registry.register(engine_obj)
        return

    raise PluginError(
        "Engine module must expose register_engines(registry), ENGINES, or ENGINE."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
    engine_command: str | None = None,
    engine_timeout: float | None = None,
) -> EngineRegistry:
    """Create engine registry from plugin modules and an optional command.

    Parameters
    ----------
    extra_modules : Iterable[str] | None, optional
        Engine modules (import paths or files) to load.
    engine_command : str | None, optional
        Shell-style command line registered as the ``command`` engine.
    engine_timeout : float | None, optional
        Timeout in seconds for the ``command`` engine.
    """
    from image_assemblifier.adapters.engines import CommandEngine

    registry = EngineRegistry()
    if engine_command:
        try:
            registry.register(CommandEngine(engine_command, timeout=engine_timeout))
        except ValueError as exc:
            raise PluginError(str(exc)) from exc
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
