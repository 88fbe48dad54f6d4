from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Prevent developer machine `~/.svcs/config.txt` and SVCS_* vars from influencing tests."""

    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("SVCS_USERNAME", "SVCS_PROJECT_ROOT", "SVCS_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_project(tmp_path):
    """Create a temporary working directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project
