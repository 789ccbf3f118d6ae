"""Pytest configuration and fixtures."""

import json
from io import StringIO
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from core.commands import PackageManagerRunner
from core.reporting import Reporter
from core.resolve_node import NodeResolver, is_exact_version


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """{
  "name": "test-project",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  },
  "devDependencies": {
    "jest": "^29.0.0"
  }
}
"""


@pytest.fixture
def make_manifest(tmp_path):
    """Write a package.json under tmp_path and return its path."""

    def _make(relative_dir: str, data):
        directory = tmp_path / relative_dir if relative_dir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "package.json"
        content = data if isinstance(data, str) else json.dumps(data, indent=2) + "\n"
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def console_output():
    """A rich console writing into a buffer."""
    return Console(file=StringIO(), width=200, color_system=None)


@pytest.fixture
def reporter(console_output):
    return Reporter(console_output)


@pytest.fixture
def fake_runner():
    """Runner double that records install/test calls instead of spawning processes."""
    return MagicMock(spec=PackageManagerRunner)


@pytest.fixture
def fake_resolver():
    """Resolver double whose resolve_version echoes valid versions or returns 9.9.9."""
    resolver = MagicMock(spec=NodeResolver)

    async def _resolve(package_name, requested_version):
        if is_exact_version(requested_version):
            return requested_version
        return "9.9.9"

    resolver.resolve_version = AsyncMock(side_effect=_resolve)
    return resolver
