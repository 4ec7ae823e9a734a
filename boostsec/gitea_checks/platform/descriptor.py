"""Build platform backed by a build descriptor file."""

import logging
from collections.abc import Iterable

from boostsec.gitea_checks.clients.gitea import GiteaConnection
from boostsec.gitea_checks.models.build import Job
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import GiteaSCMSource, SCMHead, SCMRevision
from boostsec.gitea_checks.platform.base import BuildPlatform

logger = logging.getLogger(__name__)


class DescriptorPlatform(BuildPlatform):
    """Platform answering from descriptor credentials and the Gitea API."""

    def __init__(self, credentials: Iterable[Credentials]) -> None:
        """Initialize with the credentials available to the build."""
        self._credentials = {c.id: c for c in credentials}

    def find_credentials(self, job: Job, credentials_id: str) -> Credentials | None:
        """Return the descriptor credentials with ``credentials_id``."""
        return self._credentials.get(credentials_id)

    async def fetch_revision(
        self, source: GiteaSCMSource, head: SCMHead
    ) -> SCMRevision | None:
        """Ask the Gitea server for the current commit of ``head``."""
        credentials = self._credentials.get(source.credentials_id or "")
        if credentials is None:
            logger.info(
                f"No credentials to query {source.server_url} for {head.name}, "
                "skipping revision lookup"
            )
            return None

        async with GiteaConnection.open(source.server_url, credentials) as connection:
            if head.pull_request is not None:
                logger.debug(f"Fetching pull request #{head.pull_request}")
                return await connection.fetch_pull_request_revision(
                    source.repo_owner, source.repository, head
                )

            logger.debug(f"Fetching branch {head.name}")
            return await connection.fetch_branch_revision(
                source.repo_owner, source.repository, head
            )
