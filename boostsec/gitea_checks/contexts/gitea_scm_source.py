"""Context for jobs created from a Gitea branch source."""

import logging

from boostsec.gitea_checks.contexts.base import GiteaChecksContext, ValidationResult
from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.models.scm import GiteaSCMSource
from boostsec.gitea_checks.scm_facade import SCMFacade

logger = logging.getLogger(__name__)


class GiteaSCMSourceChecksContext(GiteaChecksContext):
    """Resolves repository and commit from the job's Gitea SCM source.

    The head sha is resolved once, when the context is created. Use
    ``from_run`` or ``from_job`` rather than the constructor.
    """

    def __init__(
        self,
        job: Job,
        url: str | None,
        scm_facade: SCMFacade,
        run: Run | None = None,
        sha: str | None = None,
        fetch_error: str | None = None,
    ) -> None:
        """Initialize context with an already resolved head sha.

        Args:
            job: Job the check belongs to
            url: Summary page of the job or run
            scm_facade: SCM facade used for lookups
            run: Run the check belongs to, if any
            sha: Resolved head sha
            fetch_error: Why the head revision could not be fetched, if it failed

        """
        super().__init__(job, url, scm_facade, run)
        self._sha = sha
        self._fetch_error = fetch_error

    @classmethod
    async def from_run(
        cls, run: Run, url: str | None, scm_facade: SCMFacade
    ) -> "GiteaSCMSourceChecksContext":
        """Create a context for ``run``, using the revision it checked out.

        Falls back to the current revision of the job's head when the run
        recorded none.
        """
        sha = _resolve_run_sha(run, scm_facade)
        if sha:
            return cls(run.job, url, scm_facade, run=run, sha=sha)

        try:
            sha = await _resolve_job_sha(run.job, scm_facade)
        except RuntimeError as e:
            logger.warning(f"Failed to resolve head of {run.job.display_name}: {e}")
            return cls(run.job, url, scm_facade, run=run, fetch_error=str(e))
        return cls(run.job, url, scm_facade, run=run, sha=sha)

    @classmethod
    async def from_job(
        cls, job: Job, url: str | None, scm_facade: SCMFacade
    ) -> "GiteaSCMSourceChecksContext":
        """Create a context for ``job`` using the current revision of its head."""
        try:
            sha = await _resolve_job_sha(job, scm_facade)
        except RuntimeError as e:
            logger.warning(f"Failed to resolve head of {job.display_name}: {e}")
            return cls(job, url, scm_facade, fetch_error=str(e))
        return cls(job, url, scm_facade, sha=sha)

    def _resolve_source(self) -> GiteaSCMSource | None:
        return self.scm_facade.find_gitea_scm_source(self.job)

    def _require_source(self) -> GiteaSCMSource:
        source = self._resolve_source()
        if source is None:
            raise RuntimeError(f"No Gitea SCM source found for job: {self.job.name}")
        return source

    @property
    def head_sha(self) -> str:
        """Sha resolved from the run or the job head."""
        if self._sha is None or not self._sha.strip():
            raise RuntimeError(f"No SHA found for job: {self.job.name}")
        return self._sha

    @property
    def repo_owner(self) -> str:
        """Owner configured on the Gitea source."""
        return self._require_source().repo_owner

    @property
    def repo(self) -> str:
        """Repository configured on the Gitea source."""
        return self._require_source().repository

    @property
    def server_url(self) -> str:
        """Server configured on the Gitea source."""
        source = self._resolve_source()
        if source is None:
            raise ValueError(f"Couldn't get GiteaSCMSource from job: {self.job.name}")
        return source.server_url

    @property
    def credentials_id(self) -> str | None:
        """Credentials configured on the Gitea source."""
        source = self._resolve_source()
        return source.credentials_id if source is not None else None

    def validate(self) -> ValidationResult:
        """Check source, credentials and head sha, in that order."""
        result = ValidationResult()
        result.log("Trying to resolve checks parameters from Gitea SCM...")

        if self._resolve_source() is None:
            return result.reject("Job does not use Gitea SCM")

        if not self._validate_credentials(result):
            return result

        if self._fetch_error is not None:
            return result.reject(self._fetch_error)

        if self._sha is None or not self._sha.strip():
            return result.reject(f"No HEAD SHA found for {self.repository}")

        return result


def _resolve_run_sha(run: Run, scm_facade: SCMFacade) -> str | None:
    source = scm_facade.find_gitea_scm_source(run.job)
    if source is None:
        return None

    revision = scm_facade.find_revision_for_run(source, run)
    if revision is None:
        return None

    return scm_facade.find_hash(revision)


async def _resolve_job_sha(job: Job, scm_facade: SCMFacade) -> str | None:
    """Fetch the current head revision of ``job`` and return its hash.

    Raises:
        RuntimeError: If the repository cannot be reached

    """
    source = scm_facade.find_gitea_scm_source(job)
    head = scm_facade.find_head(job)
    if source is None or head is None:
        return None

    revision = await scm_facade.fetch_revision(source, head)
    if revision is None:
        logger.debug(f"No revision found for {head.name} of job {job.display_name}")
        return None

    return scm_facade.find_hash(revision)
