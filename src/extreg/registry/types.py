"""Registry types: RegistryState, LoadErrorKind, LoadDiagnostic, ScanReport."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

from extreg.function import ExtensionFunctionDefinition, QualifiedName

__all__ = [
    "RegistryState",
    "LoadErrorKind",
    "LoadDiagnostic",
    "CandidateType",
    "ArchiveLoadResult",
    "ScanReport",
    "RegistrationResult",
]


class RegistryState(enum.Enum):
    """Lifecycle of a capability registry."""

    EMPTY = "empty"
    POPULATING = "populating"
    POPULATED = "populated"


class LoadErrorKind(enum.Enum):
    """Classification of a failure while scanning, loading or registering."""

    TYPE_NOT_FOUND = "type_not_found"
    ACCESS_DENIED = "access_denied"
    IO_ERROR = "io_error"
    MODULE_ERROR = "module_error"
    INSTANTIATION_FAILED = "instantiation_failed"
    MISSING_CONSTRUCTOR = "missing_constructor"
    REGISTRATION_FAILED = "registration_failed"


@dataclass(frozen=True)
class LoadDiagnostic:
    """One non-fatal failure recorded by the pipeline."""

    kind: LoadErrorKind
    source: str
    message: str
    type_name: str | None = None

    def __str__(self) -> str:
        where = f"{self.source}!{self.type_name}" if self.type_name else self.source
        return f"{self.kind.value}: {where}: {self.message}"


@dataclass(frozen=True)
class CandidateType:
    """A module entry found inside an archive, before it is loaded."""

    archive: Path
    entry_name: str
    module_name: str


@dataclass
class ArchiveLoadResult:
    """Extension function classes found in one archive, plus any failures."""

    archive: Path
    implementations: list[type[ExtensionFunctionDefinition]] = field(default_factory=list)
    diagnostics: list[LoadDiagnostic] = field(default_factory=list)


@dataclass
class ScanReport:
    """Outcome of one physical scan of the plugin directories."""

    roots: tuple[str, ...] = ()
    archives: list[Path] = field(default_factory=list)
    implementations: list[type[ExtensionFunctionDefinition]] = field(default_factory=list)
    diagnostics: list[LoadDiagnostic] = field(default_factory=list)

    def merge(self, result: ArchiveLoadResult) -> None:
        """Accumulate one archive's result into this report."""
        self.implementations.extend(result.implementations)
        self.diagnostics.extend(result.diagnostics)


@dataclass
class RegistrationResult:
    """Outcome of registering extension functions into a host configuration."""

    registered: list[ExtensionFunctionDefinition] = field(default_factory=list)
    namespaces: list[QualifiedName] = field(default_factory=list)
    diagnostics: list[LoadDiagnostic] = field(default_factory=list)

    @property
    def xmlns(self) -> list[str]:
        """Namespace declarations as ``xmlns:prefix="uri"`` strings."""
        return [qname.xmlns for qname in self.namespaces]
