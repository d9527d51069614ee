"""Plugin loader facade: scan once, register into a transformer factory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from extreg.config import Config, LoaderSettings
from extreg.function import QualifiedName
from extreg.host import new_transformer_factory, supports_registration
from extreg.registry.registrar import register_all
from extreg.registry.registry import CapabilityRegistry, get_default_registry
from extreg.registry.scanner import split_plugin_dirs
from extreg.registry.types import LoadDiagnostic

logger = logging.getLogger(__name__)

__all__ = ["PluginLoader"]


class PluginLoader:
    """Loads extension functions from plugin directories into a transformer factory.

    Constructing a loader triggers the registry scan if it has not run yet.
    The registry is process-wide by default, so only the first loader's
    directories are scanned; later loaders reuse what it found.
    """

    def __init__(
        self,
        plugin_dirs: str | Path | Iterable[str | Path] | None = None,
        *,
        config: Config | None = None,
        registry: CapabilityRegistry | None = None,
    ) -> None:
        """Initialize the loader and make sure the registry is populated.

        Args:
            plugin_dirs: A comma-separated string or a list of directories.
                Defaults to the ``plugins`` setting (``./plugins``).
            config: Settings source. Defaults to ``EXTREG_*`` environment variables.
            registry: Registry to populate. Defaults to the process-wide one.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        if config is None:
            config = Config.from_env()
        self._settings = LoaderSettings.from_config(config)

        if plugin_dirs is None:
            dirs = list(self._settings.plugins)
        elif isinstance(plugin_dirs, (str, Path)):
            dirs = split_plugin_dirs(str(plugin_dirs))
        else:
            dirs = split_plugin_dirs(str(d) for d in plugin_dirs)

        self._registry = registry if registry is not None else get_default_registry()
        self._plugin_dirs = tuple(dirs)
        self._namespaces: list[QualifiedName] = []
        self._registration_diagnostics: list[LoadDiagnostic] = []
        self._registry.ensure_populated(self._plugin_dirs, self._settings.archive_suffixes)

    @property
    def plugin_dirs(self) -> tuple[str, ...]:
        """Directories this loader was asked to scan."""
        return self._plugin_dirs

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    @property
    def settings(self) -> LoaderSettings:
        return self._settings

    def get_transformer_factory(self) -> Any:
        """Return a new transformer factory with every discovered function registered.

        If the configured factory has no extensible configuration, registration
        is skipped with a warning and the factory is returned as is.
        """
        factory = new_transformer_factory(self._settings)
        if not supports_registration(factory):
            logger.warning("Transformer factory %r does not accept extension functions", factory)
            return factory

        result = register_all(self._registry.implementations, factory.configuration, self._namespaces)
        self._registration_diagnostics.extend(result.diagnostics)
        logger.info("Registered %d extension function(s) with %r", len(result.registered), factory)
        return factory

    def get_prefix_namespace(self) -> list[str]:
        """Namespace declarations of the registered functions as ``xmlns:`` strings."""
        return [qname.xmlns for qname in self._namespaces]

    @property
    def namespaces(self) -> list[QualifiedName]:
        return list(self._namespaces)

    @property
    def diagnostics(self) -> list[LoadDiagnostic]:
        """Scan diagnostics from the registry followed by this loader's registration failures."""
        return list(self._registry.diagnostics) + list(self._registration_diagnostics)
