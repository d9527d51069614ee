"""Shared pytest fixtures for the registry test suite."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Callable

import pytest


@pytest.fixture
def plugin_tree(tmp_path: Path, make_archive: Callable[..., Path], sources: SimpleNamespace) -> Path:
    """Create a plugins directory with valid, invalid and unrelated files.

    Layout::

        plugins/
            alpha.zip            one extension function (prefix "a")
            notes.txt            ignored
            nested/deeper/
                beta.pyz         one extension function (prefix "b")
                gamma.zip        plain classes only
            broken.zip           not a zip file
    """
    root = tmp_path / "plugins"
    make_archive(
        "plugins/alpha.zip",
        {"alpha/func.py": sources.plugin(class_name="Alpha", prefix="a", uri="urn:alpha", local_name="alpha")},
    )
    make_archive(
        "plugins/nested/deeper/beta.pyz",
        {"beta.py": sources.plugin(class_name="Beta", prefix="b", uri="urn:beta", local_name="beta")},
    )
    make_archive("plugins/nested/deeper/gamma.zip", {"gamma/util.py": sources.plain})
    (root / "notes.txt").write_text("not a plugin")
    (root / "broken.zip").write_bytes(b"this is not a zip archive")
    return root
