"""
Collector exceptions

Startup failures (secrets) are fatal; request failures (metrics,
collaborators) are converted to JSON error responses by the API layer.
"""


class CollectorError(Exception):
    """Base class for all collector failures."""

    pass


# Secret store


class SecretError(CollectorError):
    """Secret could not be read from the secret store."""

    pass


class SecretConnectionError(SecretError):
    """Secret store unreachable or no access token configured."""

    pass


class SecretNotFoundError(SecretError):
    """Nothing stored at the requested secret path."""

    pass


class MalformedSecretError(SecretError):
    """Secret payload exists but the requested field is missing or not a string."""

    pass


# Per-request adapters


class ClientUninitializedError(CollectorError):
    """Adapter was constructed without its underlying API client."""

    pass


class IdentityMissingError(CollectorError):
    """No EC2 instance ID is available to filter metrics by."""

    pass


class MetricsQueryError(CollectorError):
    """CloudWatch rejected or failed the metrics query."""

    pass


class CollaboratorQueryError(CollectorError):
    """GitHub collaborator listing failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
