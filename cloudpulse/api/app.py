"""
FastAPI Application - CloudPulse Dashboard API

Serves live EC2 usage from CloudWatch, the GitHub collaborator list of the
configured repository, and the static dashboard frontend.

Usage:
    # Production (validates config, loads secrets, then serves)
    cloudpulse

    # Programmatic
    from cloudpulse.api.app import create_app
    app = create_app(context, frontend_dir=Path("frontend"))

Endpoints:
    GET /api/ec2-usage        Latest CPU / network metrics of this instance
    GET /api/github-users     Repository collaborators (first page, max 100)
    GET /api/free-tier-usage  Static informational message
    GET /health               Liveness probe
    GET /*                    Static frontend files
"""

from pathlib import Path
from typing import Any

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cloudpulse import __version__
from cloudpulse.api.middleware import ApiHeadersMiddleware, RequestIDMiddleware
from cloudpulse.collectors import (
    ClientUninitializedError,
    CollaboratorQueryError,
    IdentityMissingError,
    MetricsQueryError,
)
from cloudpulse.context import AppContext
from cloudpulse.core import get_logger

logger = get_logger(__name__)

FREE_TIER_MESSAGE = {
    "message": (
        "AWS Free Tier usage is not computed by CloudPulse to avoid incurring API costs. "
        "Check the AWS Billing console (Free Tier page) for current usage."
    )
}

DEFAULT_INDEX_HTML = (
    "<h1>Welcome to CloudPulse</h1>"
    "<p>Go to /api/ec2-usage for EC2 metrics or /api/github-users for repository collaborators.</p>"
)


def ensure_frontend_directory(frontend_dir: Path) -> Path:
    """
    Make sure the static directory exists, creating a default index.html if not.

    Returns:
        The frontend directory path
    """
    if not frontend_dir.is_dir():
        logger.warning(
            "Frontend directory not found, creating a default index.html",
            extra={"frontend_dir": str(frontend_dir)},
        )
        frontend_dir.mkdir(parents=True, exist_ok=True)
        (frontend_dir / "index.html").write_text(DEFAULT_INDEX_HTML, encoding="utf-8")
    return frontend_dir


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(context: AppContext, frontend_dir: Path = Path("frontend")) -> FastAPI:
    """Create and configure the FastAPI application for one process context."""

    app = FastAPI(
        title="CloudPulse",
        description="EC2 usage and GitHub collaborator dashboard",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.context = context

    # Last added is executed first
    app.add_middleware(ApiHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ============================================================
    # Health Check
    # ============================================================

    @app.get("/health", tags=["Health"])
    def health_check() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "instance_id_resolved": context.has_instance_id,
        }

    # ============================================================
    # EC2 Usage
    # ============================================================

    @app.get("/api/ec2-usage", tags=["Metrics"])
    def get_ec2_usage():
        """
        Latest CPUUtilization, NetworkIn and NetworkOut for this instance.

        Returns:
            200 with the metrics map; 503 when the instance ID is unknown;
            500 when CloudWatch fails
        """
        if context.metrics_client is None:
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "CloudWatch client not initialized")

        try:
            metrics = context.metrics_client.fetch_instance_metrics(context.instance_id)
        except IdentityMissingError as e:
            logger.warning("EC2 usage requested without an instance ID")
            return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))
        except (ClientUninitializedError, MetricsQueryError) as e:
            logger.error("Failed to fetch EC2 metrics", extra={"error": str(e)}, exc_info=True)
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
        except Exception as e:
            logger.error("Unexpected error fetching EC2 metrics", exc_info=True)
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Unexpected error: {e}")

        return JSONResponse(content=metrics.to_dict())

    # ============================================================
    # GitHub Collaborators
    # ============================================================

    @app.get("/api/github-users", tags=["GitHub"])
    def get_github_users():
        """
        Collaborators of the configured repository, in GitHub's order.

        Returns:
            200 with a list of {login, avatar_url, html_url, role_name}; 500 on failure
        """
        if context.collaborator_client is None:
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "GitHub client not initialized")

        repo = context.github_repo
        try:
            records = context.collaborator_client.list_collaborators(repo.owner, repo.repo)
        except (ClientUninitializedError, CollaboratorQueryError) as e:
            logger.error("Failed to list GitHub collaborators", extra={"error": str(e)}, exc_info=True)
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
        except Exception as e:
            logger.error("Unexpected error listing GitHub collaborators", exc_info=True)
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Unexpected error: {e}")

        return JSONResponse(content=[record.to_dict() for record in records])

    # ============================================================
    # Free Tier
    # ============================================================

    @app.get("/api/free-tier-usage", tags=["Metrics"])
    def get_free_tier_usage():
        """Informational only; no AWS call is made."""
        return JSONResponse(content=FREE_TIER_MESSAGE)

    # ============================================================
    # Static Frontend
    # ============================================================

    # Mounted last so the API routes above take precedence
    app.mount(
        "/",
        StaticFiles(directory=ensure_frontend_directory(Path(frontend_dir)), html=True),
        name="frontend",
    )

    return app
