"""
EC2 Instance Identity Resolver

Determines which EC2 instance the process runs on by asking the instance
metadata service (IMDSv2, falling back to IMDSv1). Off EC2 the metadata call
fails fast and the EC2_INSTANCE_ID_OVERRIDE value is used instead.

Usage:
    from cloudpulse.collectors.instance_identity import InstanceIdentityResolver

    instance_id = InstanceIdentityResolver(override=os.getenv("EC2_INSTANCE_ID_OVERRIDE", "")).resolve()
    if not instance_id:
        ...  # metrics endpoint will answer 503
"""

import requests

from cloudpulse.core import get_logger
from cloudpulse.http_client import SecureHTTPClient

logger = get_logger(__name__)

METADATA_BASE_URL = "http://169.254.169.254/latest"
METADATA_TIMEOUT_SECONDS = 2
TOKEN_TTL_SECONDS = 21600


class InstanceIdentityResolver:
    """
    Resolves the local EC2 instance ID once at startup.

    Never raises: an unresolved identity is reported as an empty string.
    """

    def __init__(
        self,
        http: SecureHTTPClient | None = None,
        override: str = "",
        base_url: str = METADATA_BASE_URL,
        timeout: float = METADATA_TIMEOUT_SECONDS,
    ):
        # The metadata service is link-local; a forward proxy would answer for another host
        self.http = http or SecureHTTPClient(timeout=timeout, trust_env=False)
        self.override = (override or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _session_token(self) -> str | None:
        """
        Request an IMDSv2 session token.

        Returns None when the service answers without a token (IMDSv1 only).
        Network errors propagate to the caller.
        """
        response = self.http.put(
            f"{self.base_url}/api/token",
            headers={"X-aws-ec2-metadata-token-ttl-seconds": str(TOKEN_TTL_SECONDS)},
            timeout=self.timeout,
        )
        if not response.ok:
            logger.debug("IMDSv2 token request rejected", extra={"status_code": response.status_code})
            return None
        return response.text.strip() or None

    def query_metadata(self) -> str:
        """
        Ask the metadata service for the instance ID.

        Returns:
            Instance ID, or an empty string on any failure
        """
        try:
            token = self._session_token()
            headers = {"X-aws-ec2-metadata-token": token} if token else {}
            response = self.http.get(
                f"{self.base_url}/meta-data/instance-id",
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.info("EC2 metadata service unreachable", extra={"error": str(e)})
            return ""

        if not response.ok:
            logger.warning("EC2 metadata service returned an error", extra={"status_code": response.status_code})
            return ""

        return response.text.strip()

    def resolve(self) -> str:
        """
        Resolve the instance ID: metadata service first, then the override.

        Returns:
            Instance ID, or an empty string when neither source provides one
        """
        instance_id = self.query_metadata()
        if instance_id:
            logger.info("Resolved instance ID from EC2 metadata", extra={"instance_id": instance_id})
            return instance_id

        if self.override:
            logger.info("Using EC2_INSTANCE_ID_OVERRIDE", extra={"instance_id": self.override})
            return self.override

        logger.warning(
            "EC2 instance ID could not be determined; /api/ec2-usage will be unavailable. "
            "Set EC2_INSTANCE_ID_OVERRIDE when running outside EC2."
        )
        return ""
