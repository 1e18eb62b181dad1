"""Shared fixtures for KubeFuzz tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from kubefuzz.constants.enums import ResourceKind
from kubefuzz.models.core.item import Item


@pytest.fixture
def make_item():
    """Factory for Items with sensible defaults."""

    def _make(
        name: str = "nginx",
        status: str = "Running",
        kind: ResourceKind = ResourceKind.POD,
        namespace: str = "default",
        context: str = "",
        age: str = "1d",
    ) -> Item:
        return Item(
            kind=kind,
            namespace=namespace,
            name=name,
            status=status,
            age=age,
            context=context,
        )

    return _make


@pytest.fixture
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at a temporary location."""
    for variable in ("XDG_CONFIG_HOME", "XDG_STATE_HOME", "XDG_RUNTIME_DIR"):
        target = tmp_path / variable.lower()
        target.mkdir(mode=0o700)
        monkeypatch.setenv(variable, str(target))
    return tmp_path
