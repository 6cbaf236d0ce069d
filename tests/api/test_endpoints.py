"""
API Endpoints Integration Tests

Tests every dashboard endpoint for status codes, JSON shape and headers.
"""

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from cloudpulse.api.app import FREE_TIER_MESSAGE
from cloudpulse.collectors import (
    CloudWatchMetricsClient,
    CollaboratorQueryError,
    IdentityMissingError,
    MetricsQueryError,
)
from cloudpulse.domain import CollaboratorRecord, InstanceMetrics, MetricUnavailable, MetricValue

TIMESTAMP = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================
# EC2 Usage
# ============================================================


class TestEC2Usage:
    """Tests for GET /api/ec2-usage"""

    def test_returns_metrics(self, client, metrics_client):
        """Successful CloudWatch query returns the metrics map"""
        metrics_client.fetch_instance_metrics.return_value = InstanceMetrics(
            instance_id="i-0abc",
            readings={
                "CPUUtilization": MetricValue(7.25, TIMESTAMP),
                "NetworkIn": MetricValue(1000.0, TIMESTAMP),
                "NetworkOut": MetricUnavailable(),
            },
        )

        response = client.get("/api/ec2-usage")

        assert response.status_code == 200
        data = response.json()
        assert data["InstanceID"] == "i-0abc"
        assert data["CPUUtilization"] == 7.25
        assert data["CPUUtilizationTimestamp"] == "2024-05-01T12:00:00Z"
        assert data["NetworkOut"] == "N/A"
        metrics_client.fetch_instance_metrics.assert_called_once_with("i-0abc")

    def test_no_data_message_passed_through(self, client, metrics_client):
        """Informational message is included when CloudWatch has no series"""
        metrics_client.fetch_instance_metrics.return_value = InstanceMetrics(
            instance_id="i-0abc", message="No CloudWatch metric data available"
        )

        data = client.get("/api/ec2-usage").json()

        assert data["message"] == "No CloudWatch metric data available"

    def test_unresolved_identity_returns_503(self, make_client, context):
        """No metadata and no override -> 503 with an instance ID error"""
        cloudwatch = Mock()
        ctx = replace(context, instance_id="", metrics_client=CloudWatchMetricsClient(cloudwatch))

        response = make_client(ctx).get("/api/ec2-usage")

        assert response.status_code == 503
        assert "instance ID" in response.json()["error"]
        cloudwatch.get_metric_data.assert_not_called()

    def test_identity_error_from_adapter_returns_503(self, client, metrics_client):
        """IdentityMissingError maps to 503"""
        metrics_client.fetch_instance_metrics.side_effect = IdentityMissingError("EC2 instance ID not available")

        response = client.get("/api/ec2-usage")

        assert response.status_code == 503

    def test_cloudwatch_failure_returns_500(self, client, metrics_client):
        """Remote errors return 500 with the underlying text"""
        metrics_client.fetch_instance_metrics.side_effect = MetricsQueryError("Throttling: Rate exceeded")

        response = client.get("/api/ec2-usage")

        assert response.status_code == 500
        assert response.json() == {"error": "Throttling: Rate exceeded"}

    def test_uninitialized_client_returns_500(self, make_client, context):
        """Missing CloudWatch client returns 500"""
        response = make_client(replace(context, metrics_client=None)).get("/api/ec2-usage")

        assert response.status_code == 500
        assert "not initialized" in response.json()["error"]

    def test_unexpected_error_returns_500(self, client, metrics_client):
        """Unexpected exceptions are converted, not propagated"""
        metrics_client.fetch_instance_metrics.side_effect = RuntimeError("boom")

        response = client.get("/api/ec2-usage")

        assert response.status_code == 500
        assert "boom" in response.json()["error"]


# ============================================================
# GitHub Users
# ============================================================


class TestGitHubUsers:
    """Tests for GET /api/github-users"""

    def test_returns_collaborators_in_order(self, client, collaborator_client):
        """Output preserves API order and always has four string fields"""
        collaborator_client.list_collaborators.return_value = [
            CollaboratorRecord("octocat", "https://avatars/1", "https://github.com/octocat", "admin"),
            CollaboratorRecord("hubot", "", "https://github.com/hubot", "write"),
        ]

        response = client.get("/api/github-users")

        assert response.status_code == 200
        users = response.json()
        assert [u["login"] for u in users] == ["octocat", "hubot"]
        assert users[1]["avatar_url"] == ""
        for user in users:
            assert set(user) == {"login", "avatar_url", "html_url", "role_name"}
            assert all(isinstance(value, str) for value in user.values())
        collaborator_client.list_collaborators.assert_called_once_with("octo-org", "cloudpulse")

    def test_empty_list(self, client, collaborator_client):
        """No collaborators returns an empty JSON array"""
        collaborator_client.list_collaborators.return_value = []

        response = client.get("/api/github-users")

        assert response.status_code == 200
        assert response.json() == []

    def test_github_failure_returns_500(self, client, collaborator_client):
        """GitHub errors return 500 with the error text"""
        collaborator_client.list_collaborators.side_effect = CollaboratorQueryError(
            "GitHub returned HTTP 401", status_code=401
        )

        response = client.get("/api/github-users")

        assert response.status_code == 500
        assert response.json() == {"error": "GitHub returned HTTP 401"}

    def test_uninitialized_client_returns_500(self, make_client, context):
        """Missing GitHub client returns 500"""
        response = make_client(replace(context, collaborator_client=None)).get("/api/github-users")

        assert response.status_code == 500
        assert "not initialized" in response.json()["error"]


# ============================================================
# Free Tier
# ============================================================


class TestFreeTierUsage:
    """Tests for GET /api/free-tier-usage"""

    def test_returns_static_message(self, client, metrics_client, collaborator_client):
        """Static message, no adapter calls"""
        response = client.get("/api/free-tier-usage")

        assert response.status_code == 200
        assert response.json() == FREE_TIER_MESSAGE
        metrics_client.fetch_instance_metrics.assert_not_called()
        collaborator_client.list_collaborators.assert_not_called()

    def test_idempotent(self, client):
        """Repeated calls return the identical body"""
        bodies = {client.get("/api/free-tier-usage").text for _ in range(5)}

        assert len(bodies) == 1


# ============================================================
# Headers
# ============================================================


class TestApiHeaders:
    """JSON and CORS headers on API responses"""

    @pytest.mark.parametrize("path", ["/api/free-tier-usage", "/api/github-users", "/api/ec2-usage"])
    def test_json_and_cors_headers(self, client, collaborator_client, metrics_client, path):
        """All API routes answer JSON with an open CORS policy"""
        collaborator_client.list_collaborators.return_value = []
        metrics_client.fetch_instance_metrics.return_value = InstanceMetrics(instance_id="i-0abc")

        response = client.get(path)

        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["access-control-allow-origin"] == "*"
        assert "no-cache" in response.headers["cache-control"]

    def test_error_responses_also_carry_cors(self, client, metrics_client):
        """Error bodies keep the API headers"""
        metrics_client.fetch_instance_metrics.side_effect = MetricsQueryError("down")

        response = client.get("/api/ec2-usage")

        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["content-type"].startswith("application/json")


# ============================================================
# Health and Static Files
# ============================================================


class TestHealth:
    """Tests for GET /health"""

    def test_health_reports_identity(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["instance_id_resolved"] is True

    def test_health_without_identity(self, make_client, context):
        response = make_client(replace(context, instance_id="")).get("/health")

        assert response.json()["instance_id_resolved"] is False


class TestStaticFrontend:
    """Static file serving"""

    def test_root_serves_index(self, client):
        """GET / returns index.html"""
        response = client.get("/")

        assert response.status_code == 200
        assert "<h1>CloudPulse</h1>" in response.text

    def test_serves_assets(self, client):
        """Other files are served verbatim"""
        response = client.get("/script.js")

        assert response.status_code == 200
        assert "console.log" in response.text

    def test_unknown_path_returns_404(self, client):
        """Unmatched paths get the file server's 404"""
        response = client.get("/does-not-exist.css")

        assert response.status_code == 404

    def test_static_files_have_no_cors_header(self, client):
        """CORS header is only added to API routes"""
        response = client.get("/")

        assert "access-control-allow-origin" not in response.headers
