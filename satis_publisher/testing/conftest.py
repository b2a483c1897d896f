"""
Pytest plugin for satis publisher testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["satis_publisher.testing.conftest"]

Or import the fixtures directly:

    from satis_publisher.testing.fixtures import mock_server, build_dir
"""

# Re-export all fixtures for pytest auto-discovery
from satis_publisher.testing.fixtures import (
    anonymous_policy,
    build_dir,
    bundle_archive,
    mock_server,
    satis_json_body,
)

__all__ = [
    "mock_server",
    "anonymous_policy",
    "satis_json_body",
    "build_dir",
    "bundle_archive",
]
