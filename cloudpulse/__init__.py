"""
CloudPulse - EC2 usage and GitHub collaborator dashboard.
"""

__version__ = "1.0.0"
