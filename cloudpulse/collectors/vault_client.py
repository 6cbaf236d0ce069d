"""
Vault KV v2 Secret Client

Reads application secrets (e.g. the GitHub token) from a HashiCorp Vault
compatible key-value store over its HTTP API.

Usage:
    from cloudpulse.collectors.vault_client import VaultClient

    vault = VaultClient(address="https://vault.internal:8200", token=token)
    github_token = vault.get_secret("secret/cloudpulse", "github_token")

API Documentation:
    https://developer.hashicorp.com/vault/api-docs/secret/kv/kv-v2
"""

from typing import Any

import requests

from cloudpulse.collectors.errors import (
    MalformedSecretError,
    SecretConnectionError,
    SecretError,
    SecretNotFoundError,
)
from cloudpulse.core import get_logger
from cloudpulse.http_client import SecureHTTPClient

logger = get_logger(__name__)


class VaultClient:
    """
    Read-only client for a KV version 2 secrets engine.

    Secrets are read once at startup; nothing is cached or refreshed here.
    """

    def __init__(self, address: str, token: str, http: SecureHTTPClient | None = None):
        self.address = (address or "").rstrip("/")
        self.token = token
        self.http = http or SecureHTTPClient(headers={"Accept": "application/json"})

    def _build_url(self, mount_path: str) -> str:
        """
        Build the KV v2 data URL for a ``mount/subpath`` secret path.

        Example:
            _build_url("secret/cloudpulse")
            -> "https://vault:8200/v1/secret/data/cloudpulse"
        """
        parts = mount_path.strip("/").split("/", 1)
        if len(parts) != 2 or not all(parts):
            raise MalformedSecretError(f"Secret path must look like 'mount/subpath': {mount_path!r}")

        mount, subpath = parts
        return f"{self.address}/v1/{mount}/data/{subpath}"

    def read_secret_data(self, mount_path: str) -> dict[str, Any]:
        """
        Fetch the latest version of the secret stored at ``mount_path``.

        Returns:
            The secret's key/value payload

        Raises:
            SecretConnectionError: Store unreachable or no token configured
            SecretNotFoundError: Nothing stored at the path
            MalformedSecretError: Response is not a KV v2 payload
            SecretError: Any other non-success response
        """
        if not self.token:
            raise SecretConnectionError("Vault token is not configured")
        if not self.address:
            raise SecretConnectionError("Vault address is not configured")

        url = self._build_url(mount_path)

        try:
            response = self.http.get(url, headers={"X-Vault-Token": self.token})
        except requests.RequestException as e:
            raise SecretConnectionError(f"Unable to reach Vault at {self.address}: {e}") from e

        if response.status_code == 404:
            raise SecretNotFoundError(f"No secret found at {mount_path}")
        if response.status_code in (401, 403):
            raise SecretError(f"Vault denied access to {mount_path} (HTTP {response.status_code})")
        if not response.ok:
            raise SecretError(f"Vault returned HTTP {response.status_code} for {mount_path}")

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedSecretError(f"Vault returned a non-JSON response for {mount_path}") from e

        envelope = body.get("data") if isinstance(body, dict) else None
        data = envelope.get("data") if isinstance(envelope, dict) else None
        if not data:
            raise SecretNotFoundError(f"Secret at {mount_path} has no data")
        if not isinstance(data, dict):
            raise MalformedSecretError(f"Secret at {mount_path} is not a key/value map")

        return data

    def get_secret(self, mount_path: str, key: str) -> str:
        """
        Read one string field of a secret.

        Args:
            mount_path: Two-segment path, e.g. ``secret/cloudpulse``
            key: Field name inside the secret, e.g. ``github_token``

        Raises:
            SecretError (or a subclass) on any failure
        """
        data = self.read_secret_data(mount_path)

        value = data.get(key)
        if value is None:
            raise MalformedSecretError(f"Secret at {mount_path} has no '{key}' field")
        if not isinstance(value, str) or not value:
            raise MalformedSecretError(f"Secret field '{key}' at {mount_path} is not a non-empty string")

        logger.info("Secret loaded", extra={"secret_path": mount_path, "secret_key": key})
        return value
