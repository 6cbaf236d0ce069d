"""
External service adapters: Vault secrets, EC2 identity, CloudWatch metrics, GitHub collaborators.
"""

from .cloudwatch_client import CloudWatchMetricsClient, create_cloudwatch_client
from .errors import (
    ClientUninitializedError,
    CollaboratorQueryError,
    CollectorError,
    IdentityMissingError,
    MalformedSecretError,
    MetricsQueryError,
    SecretConnectionError,
    SecretError,
    SecretNotFoundError,
)
from .github_client import GitHubCollaboratorClient
from .instance_identity import InstanceIdentityResolver
from .vault_client import VaultClient

__all__ = [
    # Adapters
    "VaultClient",
    "InstanceIdentityResolver",
    "CloudWatchMetricsClient",
    "create_cloudwatch_client",
    "GitHubCollaboratorClient",
    # Errors
    "CollectorError",
    "SecretError",
    "SecretConnectionError",
    "SecretNotFoundError",
    "MalformedSecretError",
    "ClientUninitializedError",
    "IdentityMissingError",
    "MetricsQueryError",
    "CollaboratorQueryError",
]
