"""Publish check results as Gitea commit statuses."""

import asyncio
import logging
import re

import aiohttp
from pydantic import BaseModel, Field

from boostsec.gitea_checks.build_log import BuildLogger
from boostsec.gitea_checks.clients.gitea import GiteaApiError, GiteaConnection
from boostsec.gitea_checks.contexts.base import GiteaChecksContext
from boostsec.gitea_checks.models.check_result import CheckResult
from boostsec.gitea_checks.models.commit_status import GiteaCommitStatus
from boostsec.gitea_checks.status_mapper import GiteaChecksDetails

logger = logging.getLogger(__name__)

FAILED_PUBLISHING_MESSAGE = "Failed Publishing Gitea checks: "

_LINE_BREAKS = re.compile(r"[\r\n]")


class PublishResult(BaseModel):
    """Outcome of a publish attempt."""

    published: bool = Field(..., description="Whether Gitea accepted the status")
    status: GiteaCommitStatus = Field(..., description="Status that was sent")
    repository: str = Field(..., description="Repository as owner/repo")
    sha: str = Field(..., description="Commit the status was sent for")
    error: str | None = Field(default=None, description="Failure details")


class GiteaChecksPublisher:
    """Publishes check results to the commit resolved by a context."""

    def __init__(
        self,
        context: GiteaChecksContext,
        build_logger: BuildLogger,
        server_url: str | None = None,
    ) -> None:
        """Initialize publisher for a validated context.

        Args:
            context: Validated context to publish to
            build_logger: Console of the build
            server_url: Overrides the server URL resolved by the context

        """
        self.context = context
        self.build_logger = build_logger
        self.server_url = server_url or context.server_url

    async def publish(self, details: CheckResult) -> PublishResult:
        """Publish ``details`` as a commit status.

        Transport failures are logged and reported in the result, never
        raised: reporting a check must not fail the build.

        Raises:
            ChecksMappingError: If the check cannot be represented on Gitea

        """
        gitea_details = GiteaChecksDetails(details)
        commit_status = gitea_details.to_commit_status()
        repository = self.context.repository
        sha = self.context.head_sha

        try:
            async with GiteaConnection.open(
                self.server_url, self.context.get_credentials()
            ) as connection:
                await connection.create_commit_status(
                    self.context.repo_owner, self.context.repo, sha, commit_status
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, GiteaApiError) as e:
            logger.warning(
                _single_line(f"{FAILED_PUBLISHING_MESSAGE}{details}"), exc_info=e
            )
            self.build_logger.log(f"{FAILED_PUBLISHING_MESSAGE}{e!r}")
            return PublishResult(
                published=False,
                status=commit_status,
                repository=repository,
                sha=sha,
                error=str(e) or type(e).__name__,
            )

        self.build_logger.log(
            f"Gitea check (name: {commit_status.context}, "
            f"status: {commit_status.state.name}, "
            f"description: {commit_status.description}) has been published."
        )
        logger.debug(
            _single_line(
                f"Published check for repo: {repository}, sha: {sha}, "
                f"job name: {self.context.job.display_name}, "
                f"name: {commit_status.context}, status: {commit_status.state.name}"
            )
        )
        return PublishResult(
            published=True, status=commit_status, repository=repository, sha=sha
        )


def _single_line(message: str) -> str:
    return _LINE_BREAKS.sub("", message)
