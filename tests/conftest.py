"""
Pytest configuration and shared fixtures

Provides configuration, HTTP response doubles and sample CloudWatch / GitHub
payloads shared by the collector and API tests.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from cloudpulse.secure_config import load_config

# ===== Configuration Fixtures =====


@pytest.fixture
def base_env():
    """Minimal valid environment"""
    return {
        "VAULT_ADDR": "http://127.0.0.1:8200",
        "VAULT_TOKEN": "hvs.test-token-0123456789",
        "AWS_REGION": "us-east-1",
        "GITHUB_OWNER": "octo-org",
        "GITHUB_REPO": "cloudpulse",
    }


@pytest.fixture
def app_config(base_env):
    """Validated AppConfig built from base_env"""
    return load_config(base_env)


# ===== HTTP Fixtures =====


@pytest.fixture
def make_response():
    """Factory for requests.Response-like mocks"""

    def _make(status_code=200, json_data=None, text="", json_error=False, links=None):
        response = Mock(spec=requests.Response)
        response.status_code = status_code
        response.links = links or {}
        response.ok = 200 <= status_code < 400
        response.text = text
        if json_error:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = json_data
        return response

    return _make


# ===== CloudWatch Fixtures =====


@pytest.fixture
def sample_timestamp():
    """Provide a consistent datapoint timestamp"""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def full_metric_data_response(sample_timestamp):
    """GetMetricData response with datapoints for all three series (newest first)"""
    older = sample_timestamp.replace(minute=55, hour=11)
    return {
        "MetricDataResults": [
            {
                "Id": "cpu_utilization",
                "Label": "CPUUtilization",
                "Timestamps": [sample_timestamp, older],
                "Values": [12.5, 30.0],
                "StatusCode": "Complete",
            },
            {
                "Id": "network_in",
                "Label": "NetworkIn",
                "Timestamps": [sample_timestamp, older],
                "Values": [2048.0, 100.0],
                "StatusCode": "Complete",
            },
            {
                "Id": "network_out",
                "Label": "NetworkOut",
                "Timestamps": [sample_timestamp],
                "Values": [4096.0],
                "StatusCode": "Complete",
            },
        ]
    }


# ===== GitHub Fixtures =====


@pytest.fixture
def sample_collaborators():
    """Two collaborators, the second without an avatar URL"""
    return [
        {
            "login": "octocat",
            "avatar_url": "https://avatars.githubusercontent.com/u/583231",
            "html_url": "https://github.com/octocat",
            "role_name": "admin",
        },
        {
            "login": "hubot",
            "html_url": "https://github.com/hubot",
            "role_name": "write",
        },
    ]
