"""
Pytest fixtures for satis publisher testing.

Provides a mock server, ready-made policies and a small satis build tree.
"""

import json
from collections.abc import Generator
from pathlib import Path

import pytest

from satis_publisher.policy import AccessPolicy
from satis_publisher.testing.mock import MockRepositoryServer

INCLUDE_FILE = "include/all$c8233cd260af0878200d33532a634f58473ab51a.json"
DIST_FILE = "dist/vendor-name-dev-master-e66490.zip"


# ============================================================================
# Server and Policy Fixtures
# ============================================================================


@pytest.fixture
def mock_server() -> Generator[MockRepositoryServer, None, None]:
    """
    Provide a MockRepositoryServer for testing.

    Example:
        ```python
        def test_upload(mock_server):
            mock_server.queue(201)
            publisher = RepositoryPublisher(
                "http://localhost/",
                credentials=("user", "pass"),
                transport=mock_server.transport,
            )
            publisher.put_file("packages.json", "{}")
            assert mock_server.call_count("PUT") == 1
        ```
    """
    server = MockRepositoryServer()
    yield server
    server.reset()


@pytest.fixture
def anonymous_policy() -> AccessPolicy:
    """Provide the default policy of a server that needs no authentication."""
    return AccessPolicy().set_need_authentication(False)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def satis_json_body() -> str:
    """Provide a satis.json configuration document."""
    return json.dumps(
        {
            "name": "default name",
            "homepage": "http://localhost:54715",
            "repositories": [
                {"type": "vcs", "url": "https://github.com/vendor/name.git"},
            ],
            "require-all": True,
            "archive": {"directory": "dist", "format": "zip"},
            "output-html": False,
        },
        indent=4,
    )


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """
    Provide a satis build directory with three publishable files.

    Layout:
        build/packages.json
        build/include/all$<sha1>.json
        build/dist/vendor-name-dev-master-e66490.zip
    """
    root = tmp_path / "build"
    (root / "include").mkdir(parents=True)
    (root / "dist").mkdir()

    (root / "packages.json").write_text(
        json.dumps(
            {
                "packages": [],
                "includes": {
                    INCLUDE_FILE: {"sha1": "c8233cd260af0878200d33532a634f58473ab51a"},
                },
            },
            indent=4,
        )
    )
    (root / INCLUDE_FILE).write_text(json.dumps({"packages": {"vendor/name": {}}}))
    (root / DIST_FILE).write_bytes(b"packagezippedcontent")
    return root


@pytest.fixture
def bundle_archive(tmp_path: Path) -> Path:
    """Provide a non-empty build.zip archive."""
    archive = tmp_path / "bundle" / "build.zip"
    archive.parent.mkdir(parents=True, exist_ok=True)
    archive.write_bytes(b"repositoryzippedcontent")
    return archive
