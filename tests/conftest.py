from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from scpp.config import PackConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "SCPP_SETTINGS_FILE",
        "SCPP_ENTRY",
        "SCPP_OUTPUT",
        "SCPP_EXTENSION",
        "SCPP_DESTINATION",
        "SCPP_LOG_LEVEL",
        "SCPP_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A small entry directory: index.html and img/logo.png."""

    entry = tmp_path / "site"
    (entry / "img").mkdir(parents=True)
    (entry / "index.html").write_text("<h1>hello</h1>\n", encoding="utf-8")
    (entry / "img" / "logo.png").write_bytes(bytes(range(256)) * 4)
    return entry


@pytest.fixture
def pack_config(tmp_path: Path, site: Path) -> PackConfig:
    return PackConfig(
        entry_path=site,
        output_name="bundle",
        extension="zip",
        destination_dir=tmp_path / "dist",
    )


def write_settings(directory: Path, **overrides: object) -> Path:
    payload: dict[str, object] = {
        "entry": "./site",
        "output": "bundle",
        "extension": "zip",
        "destination": "./dist",
    }
    payload.update(overrides)
    path = directory / "scpp.yaml"
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


def tree_contents(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
