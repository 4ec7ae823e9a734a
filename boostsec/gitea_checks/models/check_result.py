"""Provider-agnostic check result reported by a build."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChecksStatus(str, Enum):
    """Lifecycle status of a check."""

    NONE = "none"
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ChecksConclusion(str, Enum):
    """Final conclusion of a completed check."""

    NONE = "none"
    SUCCESS = "success"
    NEUTRAL = "neutral"
    SKIPPED = "skipped"
    ACTION_REQUIRED = "action_required"
    CANCELED = "canceled"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class ChecksAnnotationLevel(str, Enum):
    """Severity of a single annotation."""

    NONE = "none"
    NOTICE = "notice"
    WARNING = "warning"
    FAILURE = "failure"


def _quote(value: object) -> str:
    return "null" if value is None else f"'{value}'"


def _plain(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return value.name
    return str(value)


class ChecksAnnotation(BaseModel):
    """Annotation attached to a specific location of a file."""

    model_config = ConfigDict(frozen=True)

    path: str | None = Field(default=None, description="Repository relative path")
    start_line: int | None = None
    end_line: int | None = None
    start_column: int | None = None
    end_column: int | None = None
    annotation_level: ChecksAnnotationLevel = ChecksAnnotationLevel.NONE
    message: str | None = None
    title: str | None = None
    raw_details: str | None = None

    def __str__(self) -> str:
        return (
            f"ChecksAnnotation{{path={_quote(self.path)}, "
            f"startLine={_plain(self.start_line)}, endLine={_plain(self.end_line)}, "
            f"startColumn={_plain(self.start_column)}, "
            f"endColumn={_plain(self.end_column)}, "
            f"annotationLevel={_plain(self.annotation_level)}, "
            f"message={_quote(self.message)}, title={_quote(self.title)}, "
            f"rawDetails={_quote(self.raw_details)}}}"
        )


class ChecksImage(BaseModel):
    """Image shown alongside a check output."""

    model_config = ConfigDict(frozen=True)

    alt: str
    image_url: str
    caption: str | None = None

    def __str__(self) -> str:
        return (
            f"ChecksImage{{alt={_quote(self.alt)}, imageUrl={_quote(self.image_url)}, "
            f"caption={_quote(self.caption)}}}"
        )


class ChecksAction(BaseModel):
    """Follow-up action a user can request from the check page."""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    identifier: str

    def __str__(self) -> str:
        return (
            f"ChecksAction{{label={_quote(self.label)}, "
            f"description={_quote(self.description)}, "
            f"identifier={_quote(self.identifier)}}}"
        )


class ChecksOutput(BaseModel):
    """Human readable output of a check."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    summary: str | None = None
    text: str | None = None
    annotations: list[ChecksAnnotation] = Field(default_factory=list)
    images: list[ChecksImage] = Field(default_factory=list)

    def __str__(self) -> str:
        annotations = ", ".join(str(a) for a in self.annotations)
        images = ", ".join(str(i) for i in self.images)
        return (
            f"ChecksOutput{{title={_quote(self.title)}, "
            f"summary={_quote(self.summary)}, text={_quote(self.text)}, "
            f"annotations=[{annotations}], images=[{images}]}}"
        )


class CheckResult(BaseModel):
    """Generic record of a CI check to be reported to a source host."""

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, description="Name of the check")
    status: ChecksStatus = Field(default=ChecksStatus.NONE)
    conclusion: ChecksConclusion = Field(default=ChecksConclusion.NONE)
    details_url: str | None = Field(
        default=None, description="Link to the check details page"
    )
    output: ChecksOutput | None = None
    actions: list[ChecksAction] = Field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def __str__(self) -> str:
        actions = ", ".join(str(a) for a in self.actions)
        return (
            f"CheckResult{{name={_quote(self.name)}, "
            f"detailsURL={_quote(self.details_url)}, "
            f"status={_plain(self.status)}, "
            f"conclusion={_plain(self.conclusion)}, "
            f"startedAt={_plain(self.started_at)}, "
            f"completedAt={_plain(self.completed_at)}, "
            f"output={_plain(self.output)}, actions=[{actions}]}}"
        )
