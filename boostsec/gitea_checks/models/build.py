"""Jobs and runs of the build platform."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from boostsec.gitea_checks.models.scm import (
    SCM,
    SCMHead,
    SCMRevisionAction,
    SCMSource,
)


class ScmFlowDefinition(BaseModel):
    """Pipeline script loaded from an SCM."""

    model_config = ConfigDict(frozen=True)

    type: Literal["scm"] = "scm"
    scm: SCM
    script_path: str = "Jenkinsfile"


class InlineFlowDefinition(BaseModel):
    """Pipeline script stored in the job configuration."""

    model_config = ConfigDict(frozen=True)

    type: Literal["inline"] = "inline"
    script: str = ""


FlowDefinition = Annotated[
    ScmFlowDefinition | InlineFlowDefinition, Field(discriminator="type")
]


class Job(BaseModel):
    """Build job and the SCM configuration attached to it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Short job name")
    full_name: str | None = Field(default=None, description="Full job path")
    kind: Literal["freestyle", "pipeline", "other"] = "freestyle"
    url: str | None = Field(default=None, description="Job summary page URL")
    scm: SCM | None = Field(default=None, description="Explicit freestyle SCM")
    root_scm: SCM | None = Field(default=None, description="Root project SCM")
    scms: list[SCM] = Field(
        default_factory=list, description="SCMs of a pipeline trigger item"
    )
    definition: FlowDefinition | None = None
    scm_source: SCMSource | None = Field(
        default=None, description="Branch source the job was created from"
    )
    head: SCMHead | None = Field(default=None, description="Branch head built")

    @property
    def display_name(self) -> str:
        """Full name when known, short name otherwise."""
        return self.full_name or self.name


class Run(BaseModel):
    """Single execution of a job."""

    model_config = ConfigDict(frozen=True)

    job: Job
    number: int = Field(..., ge=0)
    url: str | None = Field(default=None, description="Run summary page URL")
    environment: dict[str, str] = Field(default_factory=dict)
    revision_actions: list[SCMRevisionAction] = Field(default_factory=list)
