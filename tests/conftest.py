"""Shared test configuration and fixtures."""

import os
from pathlib import Path

import pytest

from mcp_sentinel.config import ScanSettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def scan_settings():
    return ScanSettings(worker_count=2)


@pytest.fixture
def make_tree(tmp_path):
    """Write ``{relative_path: str | bytes}`` under tmp_path and return the root."""

    def _make(files: dict) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def locked_dir(monkeypatch):
    """Make os.walk report any directory named ``locked`` as unlistable."""
    real_walk = os.walk

    def walk(top, onerror=None, **kwargs):
        for dirpath, dirnames, filenames in real_walk(top, onerror=onerror, **kwargs):
            if "locked" in dirnames:
                dirnames.remove("locked")
                if onerror is not None:
                    onerror(PermissionError(13, "Permission denied", os.path.join(dirpath, "locked")))
            yield dirpath, dirnames, filenames

    monkeypatch.setattr(os, "walk", walk)
    return "locked"
