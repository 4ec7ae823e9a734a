"""Select a context for a build and create a publisher for it."""

import logging
from collections.abc import Sequence
from typing import TextIO

from boostsec.gitea_checks.build_log import BuildLogger
from boostsec.gitea_checks.contexts.base import GiteaChecksContext, ValidationResult
from boostsec.gitea_checks.contexts.git_scm import GitSCMChecksContext
from boostsec.gitea_checks.contexts.gitea_scm_source import (
    GiteaSCMSourceChecksContext,
)
from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.platform.base import BuildPlatform
from boostsec.gitea_checks.publisher import GiteaChecksPublisher
from boostsec.gitea_checks.scm_facade import SCMFacade

logger = logging.getLogger(__name__)

NO_PUBLISHER_TITLE = "Causes for no suitable publisher found: "


class GiteaPublisherFactory:
    """Creates publishers for runs and jobs whose repository lives on Gitea."""

    def __init__(
        self,
        platform: BuildPlatform,
        scm_facade: SCMFacade | None = None,
        server_url: str | None = None,
    ) -> None:
        """Initialize factory.

        Args:
            platform: Build platform providing URLs, credentials and revisions
            scm_facade: SCM facade, defaults to one on top of ``platform``
            server_url: Overrides the server URL of created publishers

        """
        self.platform = platform
        self.scm_facade = scm_facade or SCMFacade(platform)
        self.server_url = server_url

    async def create_publisher_for_run(
        self, run: Run, build_log: TextIO
    ) -> GiteaChecksPublisher | None:
        """Create a publisher for ``run``, preferring its Gitea SCM source."""
        run_url = self.platform.get_run_url(run)
        contexts = [
            await GiteaSCMSourceChecksContext.from_run(run, run_url, self.scm_facade),
            GitSCMChecksContext(run, run_url, self.scm_facade),
        ]
        return self._create_publisher(BuildLogger(build_log), contexts)

    async def create_publisher_for_job(
        self, job: Job, build_log: TextIO
    ) -> GiteaChecksPublisher | None:
        """Create a publisher for ``job`` from its Gitea SCM source."""
        job_url = self.platform.get_job_url(job)
        contexts = [
            await GiteaSCMSourceChecksContext.from_job(job, job_url, self.scm_facade)
        ]
        return self._create_publisher(BuildLogger(build_log), contexts)

    def _create_publisher(
        self, build_logger: BuildLogger, contexts: Sequence[GiteaChecksContext]
    ) -> GiteaChecksPublisher | None:
        causes = ValidationResult()

        for context in contexts:
            result = context.validate()
            if result.valid:
                logger.info(
                    f"Publishing checks to {context.repository} "
                    f"using {type(context).__name__}"
                )
                return GiteaChecksPublisher(context, build_logger, self.server_url)
            causes.extend(result)

        logger.info(f"No suitable Gitea publisher found among {len(contexts)} contexts")
        build_logger.log_each_line([NO_PUBLISHER_TITLE, *causes.reasons])
        return None
