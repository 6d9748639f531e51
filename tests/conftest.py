"""Shared pytest fixtures for manifestlint tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from manifestlint.rules.registry import Registry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's MANIFESTLINT_* environment out of the tests."""
    monkeypatch.delenv("MANIFESTLINT_CONFIG", raising=False)


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temp directory used as CWD so config discovery stays isolated.

    Use via ``@pytest.mark.usefixtures("project_root")`` on command test
    classes; tests that need the path can request ``tmp_path`` directly.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def registry() -> Registry:
    """Empty registry for engine and plugin tests."""
    return Registry()


MANIFESTS = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: shop
spec:
  template:
    spec:
      containers:
        - name: app
          image: nginx:latest
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: settings
  namespace: shop
data:
  key: value
"""


@pytest.fixture
def manifests(tmp_path: Path) -> Path:
    """A manifest directory with one Deployment and one ConfigMap."""
    root = tmp_path / "deploy"
    root.mkdir()
    (root / "app.yaml").write_text(MANIFESTS, encoding="utf-8")
    return root
