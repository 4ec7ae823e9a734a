"""SCM configurations, sources, heads and revisions exposed by a build platform."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class UserRemoteConfig(BaseModel):
    """Remote repository configured on a Git SCM."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    credentials_id: str | None = None
    name: str | None = None
    refspec: str | None = None


class GitSCM(BaseModel):
    """Plain Git checkout configuration."""

    model_config = ConfigDict(frozen=True)

    type: Literal["git"] = "git"
    user_remote_configs: list[UserRemoteConfig] = Field(default_factory=list)
    branches: list[str] = Field(default_factory=list)


class NullSCM(BaseModel):
    """Placeholder for a job without any SCM."""

    model_config = ConfigDict(frozen=True)

    type: Literal["none"] = "none"


class UnsupportedSCM(BaseModel):
    """Any SCM other than Git, e.g. Subversion or Mercurial."""

    model_config = ConfigDict(frozen=True)

    type: Literal["unsupported"] = "unsupported"
    name: str = "unknown"


SCM = Annotated[GitSCM | NullSCM | UnsupportedSCM, Field(discriminator="type")]


class GiteaSCMSource(BaseModel):
    """Branch source pointing at a repository on a Gitea server."""

    model_config = ConfigDict(frozen=True)

    type: Literal["gitea"] = "gitea"
    id: str = Field(..., description="Source identifier")
    server_url: str = Field(..., description="Gitea server URL")
    repo_owner: str = Field(..., description="Repository owner")
    repository: str = Field(..., description="Repository name")
    credentials_id: str | None = None


class GitSCMSource(BaseModel):
    """Branch source pointing at a plain Git remote."""

    model_config = ConfigDict(frozen=True)

    type: Literal["git"] = "git"
    id: str
    remote: str
    credentials_id: str | None = None


SCMSource = Annotated[GiteaSCMSource | GitSCMSource, Field(discriminator="type")]


class SCMHead(BaseModel):
    """Branch or pull request a job builds."""

    model_config = ConfigDict(frozen=True)

    name: str
    pull_request: int | None = Field(
        default=None, description="Pull request number for change requests"
    )


class BranchRevision(BaseModel):
    """Commit at the tip of a branch."""

    model_config = ConfigDict(frozen=True)

    type: Literal["branch"] = "branch"
    head: SCMHead
    hash: str


class PullRequestRevision(BaseModel):
    """Pull request revision, pairing the proposed commit with its target."""

    model_config = ConfigDict(frozen=True)

    type: Literal["pull_request"] = "pull_request"
    head: SCMHead
    origin: BranchRevision = Field(..., description="Source side of the PR")
    target: BranchRevision = Field(..., description="Branch the PR merges into")


class OtherRevision(BaseModel):
    """Revision kind this package cannot extract a commit hash from."""

    model_config = ConfigDict(frozen=True)

    type: Literal["other"] = "other"
    head: SCMHead
    description: str | None = None


SCMRevision = Annotated[
    BranchRevision | PullRequestRevision | OtherRevision,
    Field(discriminator="type"),
]


class SCMRevisionAction(BaseModel):
    """Revision a run recorded when it checked out its source."""

    model_config = ConfigDict(frozen=True)

    source_id: str | None = None
    revision: SCMRevision
