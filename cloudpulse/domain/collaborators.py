"""
Repository collaborator domain model
"""

from dataclasses import asdict, dataclass
from typing import Any


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class CollaboratorRecord:
    """
    One collaborator of the configured GitHub repository.

    All fields are strings; optional fields missing from the API payload are
    empty strings so the dashboard always receives the same four keys.

    Attributes:
        login: GitHub account name
        avatar_url: Avatar image URL
        html_url: Profile page URL
        role_name: Repository role (admin, maintain, write, triage, read)
    """

    login: str
    avatar_url: str = ""
    html_url: str = ""
    role_name: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "CollaboratorRecord":
        """
        Build a record from one element of the GitHub collaborators response.

        Example:
            >>> CollaboratorRecord.from_api({"login": "octocat", "avatar_url": None})
            CollaboratorRecord(login='octocat', avatar_url='', html_url='', role_name='')
        """
        return cls(
            login=_as_text(payload.get("login")),
            avatar_url=_as_text(payload.get("avatar_url")),
            html_url=_as_text(payload.get("html_url")),
            role_name=_as_text(payload.get("role_name")),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
