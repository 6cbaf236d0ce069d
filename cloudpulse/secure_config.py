"""
Secure Configuration Management

Loads and validates all CloudPulse configuration from environment variables
(and an optional .env file). Fails fast on missing or invalid values so the
process never binds its HTTP listener with a broken configuration.

Usage:
    from cloudpulse.secure_config import load_config

    config = load_config()
    print(config.github.owner, config.github.repo)
    print(config.server.port)

Environment:
    VAULT_ADDR, VAULT_TOKEN           Secret store address and access token (required)
    VAULT_SECRET_PATH                 mount/subpath of the app secret (default: secret/cloudpulse)
    AWS_REGION                        CloudWatch region (required)
    GITHUB_OWNER, GITHUB_REPO         Repository whose collaborators are listed (required)
    PORT                              Listening port (default: 8080)
    EC2_INSTANCE_ID_OVERRIDE          Instance ID for runs outside EC2 (optional)
    FRONTEND_DIR                      Static asset directory (default: frontend)
    LOG_LEVEL, LOG_FORMAT             Logging level and format (text|json)

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

REQUIRED_ENV_VARS = ("VAULT_ADDR", "VAULT_TOKEN", "AWS_REGION", "GITHUB_OWNER", "GITHUB_REPO")

DEFAULT_SECRET_PATH = "secret/cloudpulse"
DEFAULT_PORT = 8080
DEFAULT_FRONTEND_DIR = "frontend"

_PLACEHOLDERS = ("your_token", "your-token", "placeholder", "replace_me", "changeme", "xxx")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("text", "json")


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class VaultConfig:
    """
    Validated secret store configuration.
    """

    address: str
    token: str = field(repr=False)
    secret_path: str = DEFAULT_SECRET_PATH

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not self.address.startswith(("http://", "https://")):
            raise ConfigurationError(f"VAULT_ADDR must be an http(s) URL: {self.address}")

        if any(placeholder in self.token.lower() for placeholder in _PLACEHOLDERS):
            raise ConfigurationError("VAULT_TOKEN contains a placeholder value - please set a real token")

        if not re.match(r"^[^/\s]+/[^\s]+$", self.secret_path):
            raise ConfigurationError(
                f"VAULT_SECRET_PATH must look like 'mount/subpath': {self.secret_path}"
            )

    @property
    def mount_path(self) -> str:
        return self.secret_path.split("/", 1)[0]

    @property
    def subpath(self) -> str:
        return self.secret_path.split("/", 1)[1]


@dataclass(frozen=True)
class GitHubRepoConfig:
    """
    Validated GitHub repository coordinates.
    """

    owner: str
    repo: str

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not re.match(r"^[A-Za-z0-9](?:[A-Za-z0-9_-]{0,99})$", self.owner):
            raise ConfigurationError(f"GITHUB_OWNER is not a valid GitHub account name: {self.owner}")

        if not re.match(r"^[A-Za-z0-9._-]{1,100}$", self.repo):
            raise ConfigurationError(f"GITHUB_REPO contains invalid characters: {self.repo}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ServerConfig:
    """
    HTTP listener, static assets and logging settings.
    """

    port: int = DEFAULT_PORT
    frontend_dir: Path = Path(DEFAULT_FRONTEND_DIR)
    log_level: str = "INFO"
    log_format: str = "text"

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not 1 <= self.port <= 65535:
            raise ConfigurationError(f"PORT must be between 1 and 65535: {self.port}")

        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}: {self.log_level}")

        if self.log_format not in _LOG_FORMATS:
            raise ConfigurationError(f"LOG_FORMAT must be one of {', '.join(_LOG_FORMATS)}: {self.log_format}")


@dataclass(frozen=True)
class AppConfig:
    """
    Complete, validated process configuration.
    """

    vault: VaultConfig
    github: GitHubRepoConfig
    server: ServerConfig
    aws_region: str
    instance_id_override: str = ""


def _parse_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer: {raw!r}") from None


def load_config(environ: Mapping[str, str] | None = None, dotenv: bool = True) -> AppConfig:
    """
    Build the validated application configuration.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        dotenv: Load a .env file into os.environ first (ignored when environ is given)

    Returns:
        AppConfig: Validated configuration

    Raises:
        ConfigurationError: If any required variable is missing or a value is invalid.
            Every missing required variable is named in a single message.
    """
    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    values = {name: (environ.get(name) or "").strip() for name in REQUIRED_ENV_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    vault = VaultConfig(
        address=values["VAULT_ADDR"].rstrip("/"),
        token=values["VAULT_TOKEN"],
        secret_path=(environ.get("VAULT_SECRET_PATH") or DEFAULT_SECRET_PATH).strip("/ "),
    )
    github = GitHubRepoConfig(owner=values["GITHUB_OWNER"], repo=values["GITHUB_REPO"])
    server = ServerConfig(
        port=_parse_port(environ.get("PORT")),
        frontend_dir=Path(environ.get("FRONTEND_DIR") or DEFAULT_FRONTEND_DIR),
        log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
        log_format=(environ.get("LOG_FORMAT") or "text").lower(),
    )

    return AppConfig(
        vault=vault,
        github=github,
        server=server,
        aws_region=values["AWS_REGION"],
        instance_id_override=(environ.get("EC2_INSTANCE_ID_OVERRIDE") or "").strip(),
    )
