"""
Test configuration and fixtures for the archive listener tests.

Provides temporary directory trees, a mover and an HTTP test client.
"""

import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from archive_listener.mover import DirectoryMover
from archive_listener.server import ServerConfig, create_app


def write_tree(root: Path, files: dict) -> Path:
    """Create files under root from {relative path: content}, None makes a directory"""
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        path = root / rel_path
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Fixture returning a tree builder rooted in tmp_path"""
    def _make(name: str, files: dict) -> Path:
        return write_tree(tmp_path / name, files)
    return _make


@pytest.fixture
def sample_source(make_tree):
    """Source tree with a 10-byte file and a 5-byte file in a temp folder"""
    return make_tree("A", {
        "data.bin": b"0123456789",
        "_cache/junk.bin": b"01234",
    })


@pytest.fixture
def mover():
    """Fixture providing a mover with default settings"""
    return DirectoryMover()


@pytest.fixture
def client():
    """Fixture providing a test client for the default application"""
    with TestClient(create_app(ServerConfig())) as test_client:
        yield test_client
