"""extreg - Extension function plugin loader for transformer factories."""

from __future__ import annotations

# Plugin interface
from extreg.function import ExtensionFunctionDefinition, QualifiedName

# Host engine
from extreg.host import (
    BasicTransformerFactory,
    Configuration,
    TransformerFactory,
    new_transformer_factory,
    supports_registration,
)

# Discovery
from extreg.loader import PluginLoader
from extreg.registry import (
    CapabilityRegistry,
    LoadDiagnostic,
    LoadErrorKind,
    RegistryState,
    get_default_registry,
)

# Config
from extreg.config import Config, LoaderSettings

# Errors
from extreg.errors import (
    ArchiveLoadError,
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    ExtregError,
    RegistrationError,
)

__version__ = "0.1.0"

__all__ = [
    # Plugin interface
    "ExtensionFunctionDefinition",
    "QualifiedName",
    # Host engine
    "BasicTransformerFactory",
    "Configuration",
    "TransformerFactory",
    "new_transformer_factory",
    "supports_registration",
    # Discovery
    "PluginLoader",
    "CapabilityRegistry",
    "LoadDiagnostic",
    "LoadErrorKind",
    "RegistryState",
    "get_default_registry",
    # Config
    "Config",
    "LoaderSettings",
    # Errors
    "ArchiveLoadError",
    "ConfigError",
    "ConfigNotFoundError",
    "ErrorCodes",
    "ExtregError",
    "RegistrationError",
]
