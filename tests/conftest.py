"""Shared fixtures: plugin source templates and zip archive builders."""

from __future__ import annotations

import zipfile
from pathlib import Path
from types import SimpleNamespace
from typing import Callable

import pytest

from extreg.registry.registry import CapabilityRegistry


# === Plugin sources ===

PLUGIN_TEMPLATE = """\
from extreg.function import ExtensionFunctionDefinition, QualifiedName


class {class_name}(ExtensionFunctionDefinition):
    min_args = 0
    max_args = 1

    @property
    def function_qname(self):
        return QualifiedName(prefix="{prefix}", uri="{uri}", local_name="{local_name}")

    def call(self, *args):
        return "{local_name}:" + ",".join(str(a) for a in args)
"""

PLAIN_CLASS_SOURCE = """\
class Helper:
    def help(self):
        return "not an extension function"
"""

MISSING_IMPORT_SOURCE = """\
import extreg_no_such_dependency


class Orphan:
    pass
"""

SYNTAX_ERROR_SOURCE = "def broken(:\n    pass\n"

NEEDS_ARGS_SOURCE = """\
from extreg.function import ExtensionFunctionDefinition, QualifiedName


class NeedsArgs(ExtensionFunctionDefinition):
    def __init__(self, config):
        self.config = config

    @property
    def function_qname(self):
        return QualifiedName(prefix="na", uri="urn:needs-args", local_name="f")

    def call(self, *args):
        return None
"""

ABSTRACT_SOURCE = """\
from extreg.function import ExtensionFunctionDefinition


class HalfDone(ExtensionFunctionDefinition):
    pass
"""

SHOUT_VIA_HELPER_SOURCE = """\
from extreg.function import ExtensionFunctionDefinition, QualifiedName

from .helpers import shout


class Shout(ExtensionFunctionDefinition):
    @property
    def function_qname(self):
        return QualifiedName(prefix="ex", uri="http://example.org/ext", local_name="shout")

    def call(self, *args):
        return shout(args[0])
"""


def plugin_source(
    class_name: str = "ExampleFunction",
    prefix: str = "ex",
    uri: str = "http://example.org/ext",
    local_name: str = "example",
) -> str:
    """Render the source of a valid extension function plugin module."""
    return PLUGIN_TEMPLATE.format(class_name=class_name, prefix=prefix, uri=uri, local_name=local_name)


def write_archive(path: Path, entries: dict[str, str], compression: int = zipfile.ZIP_DEFLATED) -> Path:
    """Write a zip archive with the given ``{entry_name: source}`` entries."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        for name, source in entries.items():
            zf.writestr(name, source)
    return path


def corrupt_entry(path: Path, marker: str) -> None:
    """Flip the stored bytes of ``marker`` so reading its entry fails the CRC check.

    The archive must have been written with ZIP_STORED.
    """
    data = path.read_bytes()
    original = marker.encode("ascii")
    assert original in data
    path.write_bytes(data.replace(original, original.swapcase(), 1))


# === Fixtures ===


@pytest.fixture
def sources() -> SimpleNamespace:
    """Canned plugin module sources."""
    return SimpleNamespace(
        plain=PLAIN_CLASS_SOURCE,
        missing_import=MISSING_IMPORT_SOURCE,
        syntax_error=SYNTAX_ERROR_SOURCE,
        needs_args=NEEDS_ARGS_SOURCE,
        abstract=ABSTRACT_SOURCE,
        shout_via_helper=SHOUT_VIA_HELPER_SOURCE,
        plugin=plugin_source,
    )


@pytest.fixture
def corrupt() -> Callable[[Path, str], None]:
    return corrupt_entry


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing archives relative to ``tmp_path``."""

    def factory(relative: str, entries: dict[str, str], compression: int = zipfile.ZIP_DEFLATED) -> Path:
        return write_archive(tmp_path / relative, entries, compression=compression)

    return factory


@pytest.fixture
def registry() -> CapabilityRegistry:
    """A fresh, empty capability registry."""
    return CapabilityRegistry()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep EXTREG_* variables from the outer environment out of the tests."""
    monkeypatch.delenv("EXTREG_PLUGINS", raising=False)
    monkeypatch.delenv("EXTREG_TRANSFORMER_FACTORY", raising=False)
