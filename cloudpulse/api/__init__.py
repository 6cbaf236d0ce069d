"""
HTTP API for the CloudPulse dashboard.
"""

from .app import create_app, ensure_frontend_directory

__all__ = ["create_app", "ensure_frontend_directory"]
