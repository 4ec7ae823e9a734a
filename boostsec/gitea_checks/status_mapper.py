"""Map generic check results to Gitea commit statuses."""

from datetime import datetime, timezone
from urllib.parse import urlsplit

from boostsec.gitea_checks.models.check_result import (
    CheckResult,
    ChecksConclusion,
    ChecksStatus,
)
from boostsec.gitea_checks.models.commit_status import (
    GITEA_MAX_CONTEXT_SIZE,
    GITEA_MAX_DESCRIPTION_SIZE,
    GiteaCommitState,
    GiteaCommitStatus,
)

TRUNCATION_MARKER = "\n\nOutput truncated."

_CONCLUSION_STATES: dict[ChecksConclusion, GiteaCommitState] = {
    ChecksConclusion.NEUTRAL: GiteaCommitState.SUCCESS,
    ChecksConclusion.SKIPPED: GiteaCommitState.SUCCESS,
    ChecksConclusion.SUCCESS: GiteaCommitState.SUCCESS,
    ChecksConclusion.ACTION_REQUIRED: GiteaCommitState.WARNING,
    ChecksConclusion.CANCELED: GiteaCommitState.FAILURE,
    ChecksConclusion.FAILURE: GiteaCommitState.FAILURE,
    ChecksConclusion.TIMEOUT: GiteaCommitState.ERROR,
}


class ChecksMappingError(ValueError):
    """Check result cannot be represented as a Gitea commit status."""


def truncate(text: str, max_size: int) -> str:
    """Shorten ``text`` to ``max_size`` characters, ending with a marker."""
    if len(text) <= max_size:
        return text
    return text[: max_size - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


class GiteaChecksDetails:
    """Adapts a generic check result to the fields of a Gitea commit status."""

    def __init__(self, details: CheckResult) -> None:
        """Wrap ``details``.

        Raises:
            ChecksMappingError: If the check is completed without a conclusion

        """
        if details.conclusion == ChecksConclusion.NONE:
            if details.status == ChecksStatus.COMPLETED:
                raise ChecksMappingError(
                    "No conclusion has been set when status is completed."
                )
            if details.completed_at is not None:
                raise ChecksMappingError(
                    'No conclusion has been set when "completedAt" is provided.'
                )

        self.details = details

    @property
    def name(self) -> str:
        """Name of the check.

        Raises:
            ChecksMappingError: If the name is blank or too long

        """
        name = self.details.name
        if name is None or not name.strip():
            raise ChecksMappingError("The check name is blank.")
        if len(name) > GITEA_MAX_CONTEXT_SIZE:
            raise ChecksMappingError(
                f"The check name exceeds {GITEA_MAX_CONTEXT_SIZE} characters: {name}"
            )
        return name

    @property
    def context_string(self) -> str:
        """Context of the commit status, shown on Gitea next to the description."""
        return self.name

    @property
    def state(self) -> GiteaCommitState:
        """Gitea state of the check."""
        if self.details.status != ChecksStatus.COMPLETED:
            return GiteaCommitState.PENDING

        state = _CONCLUSION_STATES.get(self.details.conclusion)
        if state is None:
            raise ChecksMappingError(
                f"Unsupported checks conclusion: {self.details.conclusion.name}"
            )
        return state

    @property
    def details_url(self) -> str | None:
        """Link to the check details, if it is an http(s) URL.

        Raises:
            ChecksMappingError: If the URL uses any other scheme

        """
        url = self.details.details_url
        if url is None or not url.strip():
            return None

        if urlsplit(url).scheme not in ("http", "https"):
            raise ChecksMappingError(
                f"The details url is not http or https scheme: {url}"
            )
        return url

    @property
    def description(self) -> str | None:
        """Summary of the check output, shortened to fit Gitea."""
        output = self.details.output
        if output is None or output.summary is None:
            return None
        return truncate(output.summary, GITEA_MAX_DESCRIPTION_SIZE)

    @property
    def started_at(self) -> datetime | None:
        """UTC time the check started."""
        return _to_utc(self.details.started_at)

    @property
    def completed_at(self) -> datetime | None:
        """UTC time the check completed."""
        return _to_utc(self.details.completed_at)

    def to_commit_status(self) -> GiteaCommitStatus:
        """Build the commit status sent to Gitea."""
        return GiteaCommitStatus(
            context=self.context_string,
            state=self.state,
            description=self.description,
            target_url=self.details_url,
        )


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    # naive timestamps are already UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def map_check_result(details: CheckResult) -> GiteaCommitStatus:
    """Map ``details`` to a Gitea commit status.

    Raises:
        ChecksMappingError: If the check cannot be represented on Gitea

    """
    return GiteaChecksDetails(details).to_commit_status()
