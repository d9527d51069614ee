"""Tests for the example plugins in the examples/ directory."""

from __future__ import annotations

import pathlib
import zipfile

from extreg.loader import PluginLoader
from extreg.registry.registry import CapabilityRegistry

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent.parent
EXAMPLE_PLUGIN_DIR = PROJECT_ROOT / "examples" / "plugins" / "strings"


def _build_archive(target: pathlib.Path) -> pathlib.Path:
    """Zip the example plugin sources into ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(target, "w") as zf:
        for source in sorted(EXAMPLE_PLUGIN_DIR.glob("*.py")):
            zf.write(source, arcname=f"strings/{source.name}")
    return target


class TestStringPlugins:
    def test_loads_both_functions(self, tmp_path: pathlib.Path) -> None:
        _build_archive(tmp_path / "plugins" / "strings.zip")
        loader = PluginLoader(str(tmp_path / "plugins"), registry=CapabilityRegistry())
        factory = loader.get_transformer_factory()

        assert len(factory.configuration) == 2
        assert loader.get_prefix_namespace() == ['xmlns:str="http://example.org/strings"']

    def test_functions_callable(self, tmp_path: pathlib.Path) -> None:
        _build_archive(tmp_path / "plugins" / "strings.zip")
        loader = PluginLoader(str(tmp_path / "plugins"), registry=CapabilityRegistry())
        config = loader.get_transformer_factory().configuration

        assert config.call_function("http://example.org/strings", "upper", "abc") == "ABC"
        assert config.call_function("http://example.org/strings", "join", "a", "b", "-") == "a-b"

    def test_join_on_register_hook(self, tmp_path: pathlib.Path) -> None:
        _build_archive(tmp_path / "plugins" / "strings.zip")
        loader = PluginLoader(str(tmp_path / "plugins"), registry=CapabilityRegistry())
        config = loader.get_transformer_factory().configuration

        assert config.get_extension_function("http://example.org/strings", "join").registered is True
