"""Loading extension function classes out of plugin archives."""

from __future__ import annotations

import hashlib
import importlib
import importlib.abc
import inspect
import logging
import sys
import threading
import zipfile
import zlib
from importlib.machinery import ModuleSpec
from pathlib import Path
from types import ModuleType
from typing import Iterable, Sequence

from extreg.errors import ArchiveLoadError
from extreg.function import ExtensionFunctionDefinition
from extreg.registry.types import ArchiveLoadResult, CandidateType, LoadDiagnostic, LoadErrorKind

logger = logging.getLogger(__name__)

__all__ = [
    "load_archive",
    "iter_candidates",
    "archive_namespace",
    "module_name_for_entry",
    "classify_error",
]

_MODULE_SUFFIX = ".py"
_NAMESPACE_PREFIX = "_extreg_archive_"


def archive_namespace(archive: Path) -> str:
    """Return the synthetic package name modules from ``archive`` load under."""
    digest = hashlib.sha1(str(archive).encode("utf-8")).hexdigest()[:12]
    return f"{_NAMESPACE_PREFIX}{digest}"


def module_name_for_entry(entry_name: str) -> str | None:
    """Map an archive entry path to a dotted module name.

    ``pkg/mod.py`` becomes ``pkg.mod`` and ``pkg/__init__.py`` becomes
    ``pkg``. Returns None for entries that are not Python modules.
    """
    if entry_name.endswith("/") or not entry_name.endswith(_MODULE_SUFFIX):
        return None
    parts = entry_name[: -len(_MODULE_SUFFIX)].split("/")
    if parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts or not all(p.isidentifier() for p in parts):
        return None
    return ".".join(parts)


def classify_error(exc: BaseException) -> LoadErrorKind:
    """Map an exception raised while loading a module to a LoadErrorKind."""
    if isinstance(exc, ImportError):
        return LoadErrorKind.TYPE_NOT_FOUND
    if isinstance(exc, PermissionError):
        return LoadErrorKind.ACCESS_DENIED
    if isinstance(exc, (OSError, zipfile.BadZipFile, zlib.error, EOFError, ArchiveLoadError)):
        return LoadErrorKind.IO_ERROR
    return LoadErrorKind.MODULE_ERROR


def iter_candidates(archive: Path, zf: zipfile.ZipFile) -> list[CandidateType]:
    """List the Python module entries of an open archive, in archive order."""
    candidates: list[CandidateType] = []
    for info in zf.infolist():
        module_name = None if info.is_dir() else module_name_for_entry(info.filename)
        if module_name is None:
            logger.debug("Not a module, ignoring: %s", info.filename)
            continue
        candidates.append(CandidateType(archive=archive, entry_name=info.filename, module_name=module_name))
    return candidates


class _ArchiveLoader(importlib.abc.Loader):
    """Executes one module entry of a plugin archive.

    ``entry_name`` is None for packages without an ``__init__.py``, which
    are created empty.
    """

    def __init__(self, archive: Path, entry_name: str | None) -> None:
        self.archive = archive
        self.entry_name = entry_name

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        if self.entry_name is None:
            return
        origin = f"{self.archive}/{self.entry_name}"
        # Reading through zipfile checks each entry's CRC.
        with zipfile.ZipFile(self.archive) as zf:
            try:
                source = zf.read(self.entry_name)
            except KeyError as e:
                raise ArchiveLoadError(archive=str(self.archive), reason=f"Entry {self.entry_name} is gone") from e
        module.__file__ = origin
        code = compile(source, origin, "exec", dont_inherit=True)
        exec(code, module.__dict__)


class _ArchiveFinder(importlib.abc.MetaPathFinder):
    """Resolves ``<namespace>.<dotted>`` imports against the archive owning the namespace.

    Each archive gets its own top-level package, so modules inside it can
    import their siblings relatively, in any order, without colliding with
    same-named modules of other archives.
    """

    def __init__(self) -> None:
        self._archives: dict[str, tuple[Path, frozenset[str]]] = {}
        self._lock = threading.Lock()

    def add(self, namespace: str, archive: Path, names: Iterable[str]) -> None:
        """Serve ``namespace`` from ``archive``, dropping modules loaded from an earlier read of it."""
        with self._lock:
            self._archives[namespace] = (archive, frozenset(names))
        for name in [m for m in sys.modules if m == namespace or m.startswith(f"{namespace}.")]:
            sys.modules.pop(name, None)

    def find_spec(
        self, fullname: str, path: Sequence[str] | None = None, target: ModuleType | None = None
    ) -> ModuleSpec | None:
        namespace, _, dotted = fullname.partition(".")
        with self._lock:
            known = self._archives.get(namespace)
        if known is None:
            return None
        archive, names = known

        if not dotted:
            return self._package_spec(fullname, archive, None, str(archive))

        rel = dotted.replace(".", "/")
        init_entry = f"{rel}/__init__{_MODULE_SUFFIX}"
        if init_entry in names:
            return self._package_spec(fullname, archive, init_entry, f"{archive}/{rel}")
        module_entry = f"{rel}{_MODULE_SUFFIX}"
        if module_entry in names:
            return ModuleSpec(fullname, _ArchiveLoader(archive, module_entry), origin=f"{archive}/{module_entry}")
        if any(n.startswith(f"{rel}/") for n in names):
            return self._package_spec(fullname, archive, None, f"{archive}/{rel}")
        return None

    @staticmethod
    def _package_spec(fullname: str, archive: Path, entry_name: str | None, location: str) -> ModuleSpec:
        origin = f"{archive}/{entry_name}" if entry_name else None
        spec = ModuleSpec(fullname, _ArchiveLoader(archive, entry_name), origin=origin, is_package=True)
        spec.submodule_search_locations = [location]
        return spec


_finder = _ArchiveFinder()


def _install_finder() -> None:
    if _finder not in sys.meta_path:
        sys.meta_path.append(_finder)


def _is_capability_class(cls: type, loaded_module_name: str) -> bool:
    """Check that a class is defined in the loaded module and extends the interface."""
    if cls.__module__ != loaded_module_name:
        return False
    return issubclass(cls, ExtensionFunctionDefinition) and cls is not ExtensionFunctionDefinition


def load_archive(archive: Path) -> ArchiveLoadResult:
    """Load every module in ``archive`` and collect its extension function classes.

    Modules are imported as ``<namespace>.<dotted>``; a module importing a
    sibling from the same archive loads it on demand. An archive that cannot
    be opened yields no classes and one diagnostic. A module that fails to
    load is logged and skipped; the remaining modules of the same archive are
    still loaded.
    """
    archive = Path(archive)
    result = ArchiveLoadResult(archive=archive)
    namespace = archive_namespace(archive)

    try:
        with zipfile.ZipFile(archive) as zf:
            candidates = iter_candidates(archive, zf)
            names = zf.namelist()
    except (OSError, zipfile.BadZipFile) as e:
        kind = classify_error(e)
        logger.warning("Failed to open plugin %s: %s", archive, e)
        result.diagnostics.append(LoadDiagnostic(kind=kind, source=str(archive), message=str(e)))
        return result

    _finder.add(namespace, archive, names)
    _install_finder()

    for candidate in candidates:
        try:
            mod = importlib.import_module(f"{namespace}.{candidate.module_name}")
        except Exception as e:
            kind = classify_error(e)
            logger.warning(
                "Failed to load %s from plugin %s (%s): %s",
                candidate.module_name,
                archive,
                kind.value,
                e,
            )
            result.diagnostics.append(
                LoadDiagnostic(
                    kind=kind,
                    source=str(archive),
                    message=str(e),
                    type_name=candidate.module_name,
                )
            )
            continue

        for _, cls in inspect.getmembers(mod, inspect.isclass):
            if _is_capability_class(cls, mod.__name__):
                logger.info("Found extension function %s in %s", cls.__qualname__, archive)
                result.implementations.append(cls)

    return result
