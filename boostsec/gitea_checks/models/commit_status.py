"""Gitea commit status payload."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

GITEA_MAX_CONTEXT_SIZE = 255
GITEA_MAX_DESCRIPTION_SIZE = 256


class GiteaCommitState(str, Enum):
    """States accepted by the Gitea commit status API."""

    PENDING = "pending"
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"
    ERROR = "error"


class GiteaCommitStatus(BaseModel):
    """Body of ``POST /repos/{owner}/{repo}/statuses/{sha}``."""

    model_config = ConfigDict(frozen=True)

    context: str = Field(
        ...,
        min_length=1,
        max_length=GITEA_MAX_CONTEXT_SIZE,
        description="Name of the status, shown next to the commit",
    )
    state: GiteaCommitState = Field(..., description="Commit state")
    description: str | None = Field(
        default=None,
        max_length=GITEA_MAX_DESCRIPTION_SIZE,
        description="Short description of the status",
    )
    target_url: str | None = Field(default=None, description="Link to the details")

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body sent to Gitea."""
        return self.model_dump(mode="json", exclude_none=True)
