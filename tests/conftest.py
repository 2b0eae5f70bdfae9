from pathlib import Path

import pytest

from notevault.config import Settings
from notevault.di import build_container


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def outside(tmp_path: Path) -> Path:
    d = tmp_path / "outside"
    d.mkdir()
    (d / "secret.md").write_text("top secret", encoding="utf-8")
    return d


@pytest.fixture
def container(vault: Path):
    return build_container(Settings(OBSIDIAN_VAULT_PATH=str(vault)))


@pytest.fixture
def validator(container):
    return container.validator


@pytest.fixture
def notes(container):
    return container.note_service
