"""
API Test Configuration

Provides an AppContext with mocked adapters and a TestClient around it.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from cloudpulse.api.app import create_app
from cloudpulse.collectors import CloudWatchMetricsClient, GitHubCollaboratorClient
from cloudpulse.context import AppContext
from cloudpulse.secure_config import GitHubRepoConfig


@pytest.fixture
def frontend_dir(tmp_path):
    """Static directory with a minimal dashboard page"""
    directory = tmp_path / "frontend"
    directory.mkdir()
    (directory / "index.html").write_text("<h1>CloudPulse</h1>", encoding="utf-8")
    (directory / "script.js").write_text("console.log('ok');", encoding="utf-8")
    return directory


@pytest.fixture
def metrics_client():
    return MagicMock(spec=CloudWatchMetricsClient)


@pytest.fixture
def collaborator_client():
    return MagicMock(spec=GitHubCollaboratorClient)


@pytest.fixture
def context(metrics_client, collaborator_client):
    return AppContext(
        github_repo=GitHubRepoConfig(owner="octo-org", repo="cloudpulse"),
        instance_id="i-0abc",
        metrics_client=metrics_client,
        collaborator_client=collaborator_client,
    )


@pytest.fixture
def make_client(frontend_dir):
    """Build a TestClient for an arbitrary context"""

    def _make(ctx):
        return TestClient(create_app(ctx, frontend_dir=frontend_dir))

    return _make


@pytest.fixture
def client(make_client, context):
    """Create FastAPI test client."""
    return make_client(context)
