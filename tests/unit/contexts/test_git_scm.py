"""Tests for the Git SCM context and remote URL parsing."""

from unittest.mock import MagicMock

import pytest

from boostsec.gitea_checks.contexts.git_scm import (
    GitSCMChecksContext,
    parse_remote_url,
)
from boostsec.gitea_checks.models.build import Job, Run, ScmFlowDefinition
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import GitSCM, UnsupportedSCM, UserRemoteConfig
from boostsec.gitea_checks.platform.base import BuildPlatform
from boostsec.gitea_checks.scm_facade import SCMFacade

HTTP_URL = "https://gitea.example.io/jenkinsci/gitea-checks-plugin.git"
EXISTING_HASH = "4ecc8623b06d99d5f029b66927438554fdd6a467"
CREDENTIALS = Credentials(id="credentials", token="secret")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "url",
    [
        "git@197.168.2.0:Caellion/gitea-checks-plugin",
        "git@localhost:Caellion/gitea-checks-plugin",
        "git@github.com:Caellion/gitea-checks-plugin",
        "git@github.com:Caellion/gitea-checks-plugin.git",
        "gitea.example.io:Caellion/gitea-checks-plugin.git",
        "http://github.com/Caellion/gitea-checks-plugin.git",
        "https://github.com/Caellion/gitea-checks-plugin.git",
        "https://gitea.example.io/Caellion/gitea-checks-plugin",
        "https://gitea.example.io/Caellion/gitea-checks-plugin/",
        "ssh://git@gitea.example.io:2222/Caellion/gitea-checks-plugin.git",
    ],
)
def test_parse_repository(url: str) -> None:
    """Owner and repository are parsed independently of the host."""
    remote = parse_remote_url(url)

    assert remote is not None
    assert remote.repository == "Caellion/gitea-checks-plugin"


@pytest.mark.parametrize(
    ("url", "server_url"),
    [
        ("https://gitea.example.io/o/r.git", "https://gitea.example.io"),
        ("http://user@gitea.example.io:3000/o/r", "http://gitea.example.io:3000"),
        ("https://example.io/gitea/o/r.git", "https://example.io/gitea"),
        ("git@gitea.example.io:o/r.git", "https://gitea.example.io"),
        ("ssh://git@gitea.example.io:2222/o/r.git", "https://gitea.example.io"),
    ],
)
def test_parse_server_url(url: str, server_url: str) -> None:
    """The server URL is derived from the remote."""
    remote = parse_remote_url(url)

    assert remote is not None
    assert remote.server_url == server_url


def test_parse_nested_path_uses_last_two_segments() -> None:
    """Nested paths keep the last two segments as owner and repository."""
    remote = parse_remote_url("https://gitea.example.io/group/sub/repo.git")

    assert remote is not None
    assert remote.owner == "sub"
    assert remote.repo == "repo"


@pytest.mark.parametrize(
    "url", [None, "", "ci.example.io", "https://gitea.example.io/repo.git", "git@host:"]
)
def test_parse_invalid_url(url: str | None) -> None:
    """URLs without owner and repository cannot be parsed."""
    assert parse_remote_url(url) is None


@pytest.fixture
def platform() -> MagicMock:
    """Create platform mock knowing one credentials entry."""
    platform = MagicMock(spec=BuildPlatform)
    platform.find_credentials.side_effect = lambda job, credentials_id: (
        CREDENTIALS if credentials_id == CREDENTIALS.id else None
    )
    return platform


def create_run(
    url: str | None = HTTP_URL,
    credentials_id: str | None = "credentials",
    sha: str | None = EXISTING_HASH,
    kind: str = "freestyle",
) -> Run:
    """Create a run of a job checking out ``url``."""
    scm = GitSCM(
        user_remote_configs=[UserRemoteConfig(url=url, credentials_id=credentials_id)],
        branches=[EXISTING_HASH],
    )
    if kind == "freestyle":
        job = Job(name="gitea-checks-plugin", scm=scm)
    else:
        job = Job(
            name="gitea-checks-plugin",
            kind="pipeline",
            definition=ScmFlowDefinition(scm=scm),
        )
    environment = {"GIT_COMMIT": sha} if sha is not None else {}
    return Run(job=job, number=1, environment=environment)


@pytest.mark.parametrize("kind", ["freestyle", "pipeline"])
def test_context_from_build(platform: MagicMock, kind: str) -> None:
    """The context resolves repository, sha and credentials from the run."""
    context = GitSCMChecksContext(create_run(kind=kind), "url", SCMFacade(platform))

    assert context.repository == "jenkinsci/gitea-checks-plugin"
    assert context.head_sha == EXISTING_HASH
    assert context.credentials_id == "credentials"
    assert context.server_url == "https://gitea.example.io"
    assert context.url == "url"
    assert context.get_credentials() == CREDENTIALS
    assert context.is_valid()


def test_invalid_without_git_scm(platform: MagicMock) -> None:
    """Runs without Git SCM are rejected."""
    run = Run(job=Job(name="job", scm=UnsupportedSCM(name="svn")), number=1)
    context = GitSCMChecksContext(run, None, SCMFacade(platform))

    result = context.validate()

    assert not result.valid
    assert result.reasons == [
        "Trying to resolve checks parameters from Git SCM...",
        "Job does not use Git SCM",
    ]
    assert context.credentials_id is None
    assert context.remote_url is None


def test_invalid_url(platform: MagicMock) -> None:
    """Remotes without owner and repository are rejected."""
    context = GitSCMChecksContext(
        create_run(url="ci.example.io"), None, SCMFacade(platform)
    )

    result = context.validate()

    assert not result.valid
    assert "Invalid repository url: ci.example.io" in result.reasons
    with pytest.raises(RuntimeError, match="Invalid repository url"):
        _ = context.repository


def test_invalid_without_credentials(platform: MagicMock) -> None:
    """Remotes without credentials id are rejected."""
    context = GitSCMChecksContext(
        create_run(credentials_id=None), None, SCMFacade(platform)
    )

    result = context.validate()

    assert not result.valid
    assert result.reasons[-1] == "No credentials found"


def test_invalid_with_unknown_credentials(platform: MagicMock) -> None:
    """Credential ids unknown to the platform are rejected."""
    context = GitSCMChecksContext(
        create_run(credentials_id="unknown"), None, SCMFacade(platform)
    )

    result = context.validate()

    assert not result.valid
    assert "No Gitea app credentials found: 'unknown'" in result.reasons


def test_invalid_without_sha(platform: MagicMock) -> None:
    """Runs without recorded commit are rejected."""
    context = GitSCMChecksContext(create_run(sha=None), None, SCMFacade(platform))

    result = context.validate()

    assert not result.valid
    assert "No HEAD SHA found for jenkinsci/gitea-checks-plugin" in result.reasons
    with pytest.raises(RuntimeError, match="No SHA found for job: gitea-checks-plugin"):
        _ = context.head_sha
