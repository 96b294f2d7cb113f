from __future__ import annotations

import os
from pathlib import Path

import pytest

from icolamp import _config
from icolamp.parameters import LampParameters

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")


@pytest.fixture(autouse=True)
def user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep ~/.icolamp out of the tests."""
    config_dir = tmp_path / ".icolamp"
    monkeypatch.setattr(_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(_config, "CONFIG_FILE", config_dir / "icolamp.cfg")
    return config_dir / "icolamp.cfg"


@pytest.fixture
def params() -> LampParameters:
    return LampParameters()


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT
