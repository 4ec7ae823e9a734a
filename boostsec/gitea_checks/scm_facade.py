"""Find the SCM configuration, revisions and credentials used by a build."""

import asyncio
import logging

import aiohttp

from boostsec.gitea_checks.clients.gitea import GiteaApiError
from boostsec.gitea_checks.models.build import Job, Run, ScmFlowDefinition
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import (
    SCM,
    BranchRevision,
    GiteaSCMSource,
    GitSCM,
    NullSCM,
    PullRequestRevision,
    SCMHead,
    SCMRevision,
    SCMSource,
    UserRemoteConfig,
)
from boostsec.gitea_checks.platform.base import BuildPlatform

logger = logging.getLogger(__name__)


class SCMFacade:
    """Facade to the SCM sources and SCMs attached to jobs and runs.

    Absence is never an error here: lookups return None or a NullSCM.
    """

    def __init__(self, platform: BuildPlatform) -> None:
        """Initialize facade on top of the build platform."""
        self.platform = platform

    def find_scm_source(self, job: Job) -> SCMSource | None:
        """Return the branch source the job was created from."""
        return job.scm_source

    def find_gitea_scm_source(self, job: Job) -> GiteaSCMSource | None:
        """Return the job's branch source if it is a Gitea source."""
        source = self.find_scm_source(job)
        return source if isinstance(source, GiteaSCMSource) else None

    def find_git_scm(self, build: Job | Run) -> GitSCM | None:
        """Return the SCM of a job or run if it is a Git SCM."""
        scm = self.get_scm(build)
        return scm if isinstance(scm, GitSCM) else None

    def get_user_remote_config(self, scm: GitSCM) -> UserRemoteConfig:
        """Return the first remote of ``scm``, or an empty remote."""
        if not scm.user_remote_configs:
            return UserRemoteConfig()
        return scm.user_remote_configs[0]

    def get_scm(self, build: Job | Run) -> SCM:
        """Return the SCM of a job or run, or a NullSCM if none is configured."""
        job = build.job if isinstance(build, Run) else build

        if job.kind == "freestyle":
            return self._extract_from_project(job)
        if job.kind == "pipeline":
            return self._extract_from_pipeline(job)
        return NullSCM()

    def _extract_from_project(self, job: Job) -> SCM:
        if job.scm is not None:
            return job.scm
        if job.root_scm is not None:
            return job.root_scm
        return NullSCM()

    def _extract_from_pipeline(self, job: Job) -> SCM:
        if job.scms:
            if len(job.scms) > 1:
                logger.debug(
                    f"Job {job.display_name} uses {len(job.scms)} SCMs, "
                    "using the first one"
                )
            return job.scms[0]

        if isinstance(job.definition, ScmFlowDefinition):
            return job.definition.scm

        return NullSCM()

    def find_head(self, job: Job) -> SCMHead | None:
        """Return the branch head built by the job."""
        return job.head

    def find_revision_for_run(
        self, source: GiteaSCMSource, run: Run
    ) -> SCMRevision | None:
        """Return the revision ``run`` recorded for ``source`` at checkout."""
        fallback = None
        for action in run.revision_actions:
            if action.source_id == source.id:
                return action.revision
            if action.source_id is None and fallback is None:
                fallback = action.revision
        return fallback

    async def fetch_revision(
        self, source: GiteaSCMSource, head: SCMHead
    ) -> SCMRevision | None:
        """Fetch the current revision of ``head`` from the remote repository.

        Raises:
            RuntimeError: If the repository cannot be reached

        """
        try:
            return await self.platform.fetch_revision(source, head)
        except (aiohttp.ClientError, asyncio.TimeoutError, GiteaApiError) as e:
            raise RuntimeError(
                f"Could not fetch revision from repository: {source.id} "
                f"and branch: {head.name}"
            ) from e

    def find_hash(self, revision: SCMRevision) -> str | None:
        """Return the commit hash of ``revision``.

        Pull requests resolve to the hash of their source branch. Other
        revision kinds carry no hash.
        """
        if isinstance(revision, BranchRevision):
            return revision.hash
        if isinstance(revision, PullRequestRevision):
            return revision.origin.hash
        return None

    def find_gitea_app_credentials(
        self, job: Job, credentials_id: str
    ) -> Credentials | None:
        """Return the credentials with ``credentials_id`` visible to ``job``."""
        return self.platform.find_credentials(job, credentials_id)
