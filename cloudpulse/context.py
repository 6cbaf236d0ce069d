"""
Application context and startup chain

``build_context`` runs the ordered, fail-fast initialization:

    secrets -> instance identity -> API clients

The resulting ``AppContext`` is immutable and passed explicitly to
``create_app``; request handlers never touch module-level client globals.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cloudpulse.collectors import (
    CloudWatchMetricsClient,
    GitHubCollaboratorClient,
    InstanceIdentityResolver,
    VaultClient,
    create_cloudwatch_client,
)
from cloudpulse.core import get_logger
from cloudpulse.secure_config import AppConfig, GitHubRepoConfig

logger = get_logger(__name__)

GITHUB_TOKEN_KEY = "github_token"


@dataclass(frozen=True)
class AppContext:
    """
    Everything request handlers need, resolved once at startup.

    Attributes:
        github_repo: Repository whose collaborators are listed
        instance_id: Resolved EC2 instance ID ("" when unresolved)
        metrics_client: CloudWatch adapter (None when not initialized)
        collaborator_client: GitHub adapter (None when not initialized)
    """

    github_repo: GitHubRepoConfig
    instance_id: str = ""
    metrics_client: CloudWatchMetricsClient | None = None
    collaborator_client: GitHubCollaboratorClient | None = None

    @property
    def has_instance_id(self) -> bool:
        return bool(self.instance_id)


def build_context(
    config: AppConfig,
    vault: VaultClient | None = None,
    identity_resolver: InstanceIdentityResolver | None = None,
    cloudwatch_factory: Callable[[str], Any] = create_cloudwatch_client,
) -> AppContext:
    """
    Initialize every external client in order.

    Args:
        config: Validated configuration
        vault: Secret client (built from config when omitted)
        identity_resolver: Instance identity resolver (built from config when omitted)
        cloudwatch_factory: Creates the boto3 CloudWatch client for a region

    Returns:
        AppContext ready to be served

    Raises:
        SecretError: GitHub token could not be read (fatal)
    """
    vault = vault or VaultClient(address=config.vault.address, token=config.vault.token)
    github_token = vault.get_secret(config.vault.secret_path, GITHUB_TOKEN_KEY)

    resolver = identity_resolver or InstanceIdentityResolver(override=config.instance_id_override)
    instance_id = resolver.resolve()

    metrics_client = CloudWatchMetricsClient(cloudwatch_factory(config.aws_region))
    collaborator_client = GitHubCollaboratorClient(token=github_token)

    logger.info(
        "Clients initialized",
        extra={
            "aws_region": config.aws_region,
            "github_repo": config.github.full_name,
            "instance_id": instance_id or None,
        },
    )

    return AppContext(
        github_repo=config.github,
        instance_id=instance_id,
        metrics_client=metrics_client,
        collaborator_client=collaborator_client,
    )
