"""Tests for the public API exported from the extreg package."""

from __future__ import annotations

import extreg


class TestPublicAPI:
    def test_all_names_importable(self) -> None:
        for name in extreg.__all__:
            assert hasattr(extreg, name), name

    def test_core_names_exported(self) -> None:
        for name in (
            "PluginLoader",
            "ExtensionFunctionDefinition",
            "QualifiedName",
            "CapabilityRegistry",
            "Configuration",
            "TransformerFactory",
        ):
            assert name in extreg.__all__

    def test_version(self) -> None:
        assert isinstance(extreg.__version__, str)
