"""
CloudPulse process entry point

Startup order (any failure exits with status 1 before the listener binds):
    1. Load and validate environment configuration
    2. Read the GitHub token from Vault
    3. Resolve the EC2 instance ID (non-fatal)
    4. Build the CloudWatch and GitHub clients
    5. Serve the FastAPI app with uvicorn

Usage:
    cloudpulse
    python -m cloudpulse
"""

import sys

import uvicorn

from cloudpulse.api import create_app
from cloudpulse.collectors import SecretError
from cloudpulse.context import AppContext, build_context
from cloudpulse.core import get_logger, setup_logging
from cloudpulse.secure_config import AppConfig, ConfigurationError, load_config

logger = get_logger(__name__)

LISTEN_HOST = "0.0.0.0"  # nosec B104


def initialize() -> tuple[AppConfig, AppContext]:
    """
    Run the fail-fast startup chain.

    Raises:
        ConfigurationError: Missing or invalid environment
        SecretError: Secret store unreachable or secret missing
    """
    config = load_config()
    setup_logging(level=config.server.log_level, json_output=config.server.log_format == "json")

    logger.info(
        "Starting CloudPulse",
        extra={"github_repo": config.github.full_name, "aws_region": config.aws_region, "port": config.server.port},
    )

    return config, build_context(config)


def main() -> None:
    # Bootstrap handler for startup errors; initialize() reapplies the configured level
    setup_logging(level="INFO")

    try:
        config, context = initialize()
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)
    except SecretError as e:
        logger.critical(f"Failed to load secrets: {e}")
        sys.exit(1)

    app = create_app(context, frontend_dir=config.server.frontend_dir)

    logger.info("Server starting", extra={"host": LISTEN_HOST, "port": config.server.port})
    uvicorn.run(app, host=LISTEN_HOST, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
