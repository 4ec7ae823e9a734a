"""Abstract base class for build platforms providing jobs, runs and credentials."""

from abc import ABC, abstractmethod

from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import GiteaSCMSource, SCMHead, SCMRevision


class BuildPlatform(ABC):
    """Services the build orchestration platform offers to the publisher."""

    @abstractmethod
    def find_credentials(self, job: Job, credentials_id: str) -> Credentials | None:
        """Look up credentials usable by ``job``.

        Args:
            job: Job whose security scope is searched
            credentials_id: Identifier of the credentials

        Returns:
            The credentials, or None if no usable credentials have this id

        """

    @abstractmethod
    async def fetch_revision(
        self, source: GiteaSCMSource, head: SCMHead
    ) -> SCMRevision | None:
        """Fetch the current revision of ``head`` from ``source``.

        Args:
            source: Repository to query
            head: Branch or pull request

        Returns:
            The current revision, or None if the head does not exist

        """

    def get_run_url(self, run: Run) -> str | None:
        """Return the externally reachable summary page of ``run``."""
        return run.url

    def get_job_url(self, job: Job) -> str | None:
        """Return the externally reachable summary page of ``job``."""
        return job.url
