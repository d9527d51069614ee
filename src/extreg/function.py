"""Extension function interface implemented by plugin classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from extreg.host import Configuration

__all__ = ["ExtensionFunctionDefinition", "QualifiedName"]


class QualifiedName(BaseModel):
    """A namespaced function name: prefix, namespace URI and local name."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    uri: str = Field(min_length=1)
    local_name: str = Field(min_length=1)

    @property
    def clark_name(self) -> str:
        """The name in ``{uri}local`` notation."""
        return f"{{{self.uri}}}{self.local_name}"

    @property
    def xmlns(self) -> str:
        """The namespace declaration binding this name's prefix to its URI."""
        return f'xmlns:{self.prefix}="{self.uri}"'

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.clark_name


class ExtensionFunctionDefinition(ABC):
    """Base class for extension functions shipped in plugin archives.

    Subclasses must be constructible without arguments. The host
    configuration calls :meth:`on_register` once when the instance is
    registered, then dispatches calls by :attr:`function_qname`.
    """

    min_args: int = 0
    max_args: int | None = None

    @property
    @abstractmethod
    def function_qname(self) -> QualifiedName:
        """The qualified name the function is callable under."""

    @abstractmethod
    def call(self, *args: Any) -> Any:
        """Evaluate the function."""

    def on_register(self, configuration: Configuration) -> None:
        """Called by the host configuration when this function is registered."""
        return None

    def accepts(self, arg_count: int) -> bool:
        """Return True if the function can be called with ``arg_count`` arguments."""
        if arg_count < self.min_args:
            return False
        return self.max_args is None or arg_count <= self.max_args
