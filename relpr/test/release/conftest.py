from __future__ import annotations

import pytest

from relpr.github.client import MockGitHubClient
from relpr.output.console import MockConsole


@pytest.fixture
def client() -> MockGitHubClient:
    return MockGitHubClient()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()
