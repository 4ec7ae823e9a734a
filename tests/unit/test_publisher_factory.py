"""Tests for the publisher factory."""

import io
from unittest.mock import AsyncMock

import aiohttp
import pytest

from boostsec.gitea_checks.contexts.git_scm import GitSCMChecksContext
from boostsec.gitea_checks.contexts.gitea_scm_source import (
    GiteaSCMSourceChecksContext,
)
from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import (
    BranchRevision,
    GiteaSCMSource,
    GitSCM,
    SCMHead,
    SCMRevisionAction,
    UserRemoteConfig,
)
from boostsec.gitea_checks.platform.descriptor import DescriptorPlatform
from boostsec.gitea_checks.publisher_factory import GiteaPublisherFactory

SHA = "4ecc8623b06d99d5f029b66927438554fdd6a467"
HEAD = SCMHead(name="master")
SOURCE = GiteaSCMSource(
    id="source",
    server_url="https://gitea.example.io",
    repo_owner="jenkinsci",
    repository="gitea-checks-plugin",
    credentials_id="gitea",
)
GIT_SCM = GitSCM(
    user_remote_configs=[
        UserRemoteConfig(
            url="https://gitea.example.io/jenkinsci/gitea-checks-plugin.git",
            credentials_id="gitea",
        )
    ]
)


@pytest.fixture
def platform() -> DescriptorPlatform:
    """Create platform whose revision lookups resolve the master branch."""
    platform = DescriptorPlatform(
        [Credentials(id="gitea", token="secret")]  # type: ignore[arg-type]
    )
    platform.fetch_revision = AsyncMock(  # type: ignore[method-assign]
        return_value=BranchRevision(head=HEAD, hash=SHA)
    )
    return platform


@pytest.fixture
def factory(platform: DescriptorPlatform) -> GiteaPublisherFactory:
    """Create factory on top of the platform."""
    return GiteaPublisherFactory(platform)


async def test_publisher_for_run_with_gitea_source(
    factory: GiteaPublisherFactory,
) -> None:
    """Runs of jobs created from a Gitea source use the source context."""
    job = Job(name="job", scm_source=SOURCE, head=HEAD)
    run = Run(
        job=job,
        number=1,
        url="https://ci.example.io/job/job/1/",
        revision_actions=[
            SCMRevisionAction(
                source_id="source",
                revision=BranchRevision(head=HEAD, hash="run-sha"),
            )
        ],
    )
    console = io.StringIO()

    publisher = await factory.create_publisher_for_run(run, console)

    assert publisher is not None
    assert isinstance(publisher.context, GiteaSCMSourceChecksContext)
    assert publisher.context.head_sha == "run-sha"
    assert publisher.context.url == "https://ci.example.io/job/job/1/"
    assert publisher.server_url == "https://gitea.example.io"
    assert console.getvalue() == ""


async def test_publisher_for_job_with_gitea_source(
    factory: GiteaPublisherFactory, platform: DescriptorPlatform
) -> None:
    """Jobs resolve the sha from the current revision of their head."""
    job = Job(
        name="job",
        url="https://ci.example.io/job/job/",
        scm_source=SOURCE,
        head=HEAD,
    )

    publisher = await factory.create_publisher_for_job(job, io.StringIO())

    assert publisher is not None
    assert publisher.context.head_sha == SHA
    assert publisher.context.url == "https://ci.example.io/job/job/"
    fetch_revision: AsyncMock = platform.fetch_revision  # type: ignore[assignment]
    fetch_revision.assert_awaited_once_with(SOURCE, HEAD)


async def test_publisher_for_run_with_git_scm(factory: GiteaPublisherFactory) -> None:
    """Runs without Gitea source fall back to the Git SCM context."""
    run = Run(
        job=Job(name="job", scm=GIT_SCM),
        number=1,
        environment={"GIT_COMMIT": SHA},
    )

    publisher = await factory.create_publisher_for_run(run, io.StringIO())

    assert publisher is not None
    assert isinstance(publisher.context, GitSCMChecksContext)
    assert publisher.context.repository == "jenkinsci/gitea-checks-plugin"
    assert publisher.context.head_sha == SHA


async def test_server_url_override(platform: DescriptorPlatform) -> None:
    """The factory server URL is passed to created publishers."""
    factory = GiteaPublisherFactory(platform, server_url="http://localhost:3000")
    job = Job(name="job", scm_source=SOURCE, head=HEAD)

    publisher = await factory.create_publisher_for_job(job, io.StringIO())

    assert publisher is not None
    assert publisher.server_url == "http://localhost:3000"


async def test_no_publisher_for_run(factory: GiteaPublisherFactory) -> None:
    """Runs without usable context log the causes of every context."""
    run = Run(job=Job(name="job"), number=1)
    console = io.StringIO()

    publisher = await factory.create_publisher_for_run(run, console)

    assert publisher is None
    assert console.getvalue().splitlines() == [
        "[Gitea Checks] Causes for no suitable publisher found: ",
        "[Gitea Checks] Trying to resolve checks parameters from Gitea SCM...",
        "[Gitea Checks] Job does not use Gitea SCM",
        "[Gitea Checks] Trying to resolve checks parameters from Git SCM...",
        "[Gitea Checks] Job does not use Git SCM",
    ]


async def test_no_publisher_for_job_without_credentials(
    factory: GiteaPublisherFactory,
) -> None:
    """Jobs whose credentials cannot be found get no publisher."""
    source = SOURCE.model_copy(update={"credentials_id": "unknown"})
    job = Job(name="job", scm_source=source, head=HEAD)
    console = io.StringIO()

    publisher = await factory.create_publisher_for_job(job, console)

    assert publisher is None
    assert "No Gitea app credentials found: 'unknown'" in console.getvalue()
    assert "Git SCM" not in console.getvalue()


async def test_publisher_for_run_when_gitea_unreachable(
    factory: GiteaPublisherFactory, platform: DescriptorPlatform
) -> None:
    """Revision fetch failures reject the Gitea context, not the whole run."""
    platform.fetch_revision = AsyncMock(  # type: ignore[method-assign]
        side_effect=aiohttp.ClientConnectionError("Connection refused")
    )
    run = Run(
        job=Job(name="job", scm_source=SOURCE, head=HEAD, scm=GIT_SCM),
        number=1,
        environment={"GIT_COMMIT": SHA},
    )
    console = io.StringIO()

    publisher = await factory.create_publisher_for_run(run, console)

    assert publisher is not None
    assert isinstance(publisher.context, GitSCMChecksContext)
    assert publisher.context.head_sha == SHA
    assert console.getvalue() == ""


async def test_no_publisher_for_job_when_gitea_unreachable(
    factory: GiteaPublisherFactory, platform: DescriptorPlatform
) -> None:
    """Jobs whose head cannot be fetched get no publisher."""
    platform.fetch_revision = AsyncMock(  # type: ignore[method-assign]
        side_effect=aiohttp.ClientConnectionError("Connection refused")
    )
    job = Job(name="job", scm_source=SOURCE, head=HEAD)
    console = io.StringIO()

    publisher = await factory.create_publisher_for_job(job, console)

    assert publisher is None
    assert console.getvalue().splitlines()[-1] == (
        "[Gitea Checks] Could not fetch revision from repository: source "
        "and branch: master"
    )
