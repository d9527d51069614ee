"""Host transformation engine: factory handles and their extension configuration."""

from __future__ import annotations

import importlib
import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from extreg.config import DEFAULT_TRANSFORMER_FACTORY, Config, LoaderSettings
from extreg.errors import ConfigError
from extreg.function import ExtensionFunctionDefinition

if TYPE_CHECKING:
    from extreg.function import QualifiedName

logger = logging.getLogger(__name__)

__all__ = [
    "ExtensibleConfiguration",
    "Configuration",
    "TransformerFactory",
    "BasicTransformerFactory",
    "new_transformer_factory",
    "supports_registration",
]


@runtime_checkable
class ExtensibleConfiguration(Protocol):
    """The one operation the plugin loader needs from a host configuration."""

    def register_extension_function(self, definition: ExtensionFunctionDefinition) -> None: ...


class Configuration:
    """Extension function library of a transformer factory.

    Functions are keyed by namespace URI and local name. Registering a
    function under a name that is already taken replaces the earlier one.
    """

    def __init__(self) -> None:
        self._functions: dict[tuple[str, str], ExtensionFunctionDefinition] = {}
        self._lock = threading.RLock()

    def register_extension_function(self, definition: ExtensionFunctionDefinition) -> None:
        """Register an extension function instance."""
        if not isinstance(definition, ExtensionFunctionDefinition):
            raise TypeError(f"Expected ExtensionFunctionDefinition, got {type(definition).__name__}")
        qname = definition.function_qname
        definition.on_register(self)
        with self._lock:
            previous = self._functions.get((qname.uri, qname.local_name))
            self._functions[(qname.uri, qname.local_name)] = definition
        if previous is not None:
            logger.debug("Extension function %s replaced %r", qname.clark_name, previous)

    def get_extension_function(self, uri: str, local_name: str) -> ExtensionFunctionDefinition | None:
        """Look up a registered function. Returns None if not found."""
        with self._lock:
            return self._functions.get((uri, local_name))

    @property
    def extension_functions(self) -> list[QualifiedName]:
        """Qualified names of all registered functions, in registration order."""
        with self._lock:
            return [d.function_qname for d in self._functions.values()]

    def call_function(self, uri: str, local_name: str, *args: Any) -> Any:
        """Invoke a registered extension function.

        Raises:
            LookupError: If no function is registered under the name.
            TypeError: If the function does not accept ``len(args)`` arguments.
        """
        definition = self.get_extension_function(uri, local_name)
        if definition is None:
            raise LookupError(f"Unknown extension function: {{{uri}}}{local_name}")
        if not definition.accepts(len(args)):
            raise TypeError(f"Extension function {{{uri}}}{local_name} does not accept {len(args)} argument(s)")
        return definition.call(*args)

    def __len__(self) -> int:
        with self._lock:
            return len(self._functions)


class TransformerFactory:
    """Default transformer factory, extensible through :attr:`configuration`."""

    def __init__(self, configuration: Configuration | None = None) -> None:
        self.configuration = configuration or Configuration()

    def __repr__(self) -> str:
        return f"<{type(self).__module__}.{type(self).__qualname__} functions={len(self.configuration)}>"


class BasicTransformerFactory:
    """Transformer factory without an extension function library."""

    def __repr__(self) -> str:
        return f"<{type(self).__module__}.{type(self).__qualname__}>"


def supports_registration(handle: Any) -> bool:
    """Return True if ``handle`` exposes a configuration accepting extension functions."""
    return isinstance(getattr(handle, "configuration", None), ExtensibleConfiguration)


def _import_factory(import_path: str) -> Any:
    module_name, _, attr = import_path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(message=f"Cannot import transformer factory module '{module_name}'", cause=e) from e
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ConfigError(message=f"Transformer factory '{import_path}' not found or not callable")
    return factory


def new_transformer_factory(config: Config | LoaderSettings | None = None) -> Any:
    """Create the transformer factory named by the ``transformer.factory`` setting."""
    if isinstance(config, LoaderSettings):
        import_path = config.transformer_factory
    elif config is not None:
        import_path = LoaderSettings.from_config(config).transformer_factory
    else:
        import_path = DEFAULT_TRANSFORMER_FACTORY
    return _import_factory(import_path)()
