"""
GitHub Collaborators REST Client

Lists the collaborators of one repository through the GitHub REST API.

Usage:
    from cloudpulse.collectors.github_client import GitHubCollaboratorClient

    client = GitHubCollaboratorClient(token=github_token)
    for record in client.list_collaborators("octo-org", "octo-repo"):
        print(record.login, record.role_name)

API Documentation:
    https://docs.github.com/en/rest/collaborators/collaborators#list-repository-collaborators
"""

from urllib.parse import quote

import requests

from cloudpulse.collectors.errors import ClientUninitializedError, CollaboratorQueryError
from cloudpulse.core import get_logger
from cloudpulse.domain import CollaboratorRecord
from cloudpulse.http_client import SecureHTTPClient

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
PAGE_SIZE = 100


class GitHubCollaboratorClient:
    """
    Read-only GitHub client for repository collaborators.

    Only the first page (up to 100 collaborators) is requested.
    """

    def __init__(self, token: str, http: SecureHTTPClient | None = None, base_url: str = GITHUB_API_URL):
        self.token = token
        self.base_url = base_url.rstrip("/")
        if http is None and token:
            http = SecureHTTPClient()
        self.http = http

    @staticmethod
    def _build_headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _build_url(self, owner: str, repo: str) -> str:
        return f"{self.base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/collaborators"

    def list_collaborators(self, owner: str, repo: str) -> list[CollaboratorRecord]:
        """
        List repository collaborators in API response order.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name

        Returns:
            Up to PAGE_SIZE CollaboratorRecord objects

        Raises:
            ClientUninitializedError: No GitHub token configured
            CollaboratorQueryError: Request failed or returned an unexpected payload
        """
        if not self.token or self.http is None:
            raise ClientUninitializedError("GitHub client not initialized")

        try:
            response = self.http.get(
                self._build_url(owner, repo),
                params={"per_page": PAGE_SIZE},
                headers=self._build_headers(self.token),
            )
        except requests.RequestException as e:
            raise CollaboratorQueryError(f"Failed to reach GitHub: {e}") from e

        if not response.ok:
            raise CollaboratorQueryError(
                f"GitHub returned HTTP {response.status_code} listing collaborators of {owner}/{repo}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise CollaboratorQueryError("GitHub returned a non-JSON collaborators response") from e

        if not isinstance(payload, list):
            raise CollaboratorQueryError("GitHub collaborators response is not a list")

        if not all(isinstance(item, dict) for item in payload):
            raise CollaboratorQueryError("GitHub collaborators response contains non-object entries")

        records = [CollaboratorRecord.from_api(item) for item in payload]

        if "next" in (response.links or {}):
            logger.warning(
                "Collaborator list has more pages; only the first page is returned",
                extra={"repo": f"{owner}/{repo}", "page_size": PAGE_SIZE},
            )

        return records
