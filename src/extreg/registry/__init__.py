"""Plugin discovery: archive scanning, module loading and the capability registry.

Usage::

    from extreg.registry import get_default_registry

    registry = get_default_registry()
    report = registry.ensure_populated(["./plugins"])
"""

from __future__ import annotations

from extreg.registry.archive import archive_namespace, load_archive, module_name_for_entry
from extreg.registry.registrar import register_all
from extreg.registry.registry import CapabilityRegistry, get_default_registry
from extreg.registry.scanner import scan_archives, split_plugin_dirs
from extreg.registry.types import (
    ArchiveLoadResult,
    CandidateType,
    LoadDiagnostic,
    LoadErrorKind,
    RegistrationResult,
    RegistryState,
    ScanReport,
)

__all__ = [
    "ArchiveLoadResult",
    "CandidateType",
    "CapabilityRegistry",
    "LoadDiagnostic",
    "LoadErrorKind",
    "RegistrationResult",
    "RegistryState",
    "ScanReport",
    "archive_namespace",
    "get_default_registry",
    "load_archive",
    "module_name_for_entry",
    "register_all",
    "scan_archives",
    "split_plugin_dirs",
]
