"""Abstract base class for contexts resolving where checks are published."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.scm_facade import SCMFacade

GITEA_PLUGIN_URL = "https://plugins.jenkins.io/gitea/"


@dataclass
class ValidationResult:
    """Outcome of validating a context, with the reasons that were logged."""

    valid: bool = True
    reasons: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid

    def log(self, reason: str) -> None:
        """Record a reason."""
        self.reasons.append(reason)

    def reject(self, reason: str) -> "ValidationResult":
        """Record a reason and mark the result invalid."""
        self.log(reason)
        self.valid = False
        return self

    def extend(self, other: "ValidationResult") -> None:
        """Append the reasons of another result."""
        self.reasons.extend(other.reasons)


class GiteaChecksContext(ABC):
    """Server, repository, commit and credentials a check is published to."""

    def __init__(
        self, job: Job, url: str | None, scm_facade: SCMFacade, run: Run | None = None
    ) -> None:
        """Initialize context for a job and, when available, one of its runs."""
        self.job = job
        self.run = run
        self.url = url
        self.scm_facade = scm_facade

    @property
    @abstractmethod
    def head_sha(self) -> str:
        """Commit sha the check belongs to."""

    @property
    @abstractmethod
    def repo_owner(self) -> str:
        """Owner of the source repository, e.g. ``jenkinsci``."""

    @property
    @abstractmethod
    def repo(self) -> str:
        """Name of the source repository, e.g. ``gitea-checks-plugin``."""

    @property
    @abstractmethod
    def server_url(self) -> str:
        """URL of the Gitea server hosting the repository."""

    @property
    def repository(self) -> str:
        """Full repository name, e.g. ``jenkinsci/gitea-checks-plugin``."""
        return f"{self.repo_owner}/{self.repo}"

    @property
    @abstractmethod
    def credentials_id(self) -> str | None:
        """Identifier of the credentials configured for the repository."""

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Check that every property of the context can be resolved.

        Returns:
            The validation outcome with a reason for each step that failed

        """

    def is_valid(self) -> bool:
        """Return whether the context can be used to publish."""
        return self.validate().valid

    def get_credentials(self) -> Credentials:
        """Return the credentials to access the Gitea repository.

        Raises:
            RuntimeError: If no credentials can be found

        """
        credentials = self._find_credentials()
        if credentials is None:
            raise RuntimeError(
                f"No Gitea APP credentials available for job: {self.job.name}"
            )
        return credentials

    def _find_credentials(self) -> Credentials | None:
        return self.scm_facade.find_gitea_app_credentials(
            self.job, self.credentials_id or ""
        )

    def _has_credentials_id(self) -> bool:
        credentials_id = self.credentials_id
        return credentials_id is not None and credentials_id.strip() != ""

    def _validate_credentials(self, result: ValidationResult) -> bool:
        if not self._has_credentials_id():
            result.reject("No credentials found")
            return False

        if self._find_credentials() is None:
            result.reject(f"No Gitea app credentials found: '{self.credentials_id}'")
            result.log(f"See: {GITEA_PLUGIN_URL}")
            return False

        return True
