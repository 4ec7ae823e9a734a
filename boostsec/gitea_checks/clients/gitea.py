"""Minimal Gitea REST API v1 client."""

from collections.abc import Mapping
from types import TracebackType
from urllib.parse import quote

import aiohttp

from boostsec.gitea_checks.models.commit_status import GiteaCommitStatus
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import (
    BranchRevision,
    PullRequestRevision,
    SCMHead,
)


class GiteaApiError(RuntimeError):
    """Gitea answered with an unexpected HTTP status."""

    def __init__(self, message: str, status: int) -> None:
        """Initialize with the message and the HTTP status received."""
        super().__init__(message)
        self.status = status


class GiteaConnection:
    """Authenticated connection to a Gitea server.

    Use as an async context manager so the underlying session is closed::

        async with GiteaConnection.open(url, credentials) as connection:
            await connection.create_commit_status(...)
    """

    def __init__(self, server_url: str, credentials: Credentials) -> None:
        """Initialize connection settings without opening a session."""
        self.server_url = server_url.rstrip("/")
        self.api_url = f"{self.server_url}/api/v1"
        self._credentials = credentials
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def open(cls, server_url: str, credentials: Credentials) -> "GiteaConnection":
        """Create a connection to ``server_url`` authenticated as ``credentials``."""
        return cls(server_url, credentials)

    async def __aenter__(self) -> "GiteaConnection":
        """Open the HTTP session."""
        auth = None
        headers = {"Accept": "application/json"}
        if self._credentials.token is not None:
            headers["Authorization"] = (
                f"token {self._credentials.token.get_secret_value()}"
            )
        elif self._credentials.username and self._credentials.password:
            auth = aiohttp.BasicAuth(
                self._credentials.username,
                self._credentials.password.get_secret_value(),
            )
        self._session = aiohttp.ClientSession(headers=headers, auth=auth)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Return the open session."""
        if self._session is None:
            raise RuntimeError("Gitea connection is not open")
        return self._session

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    async def create_commit_status(
        self, owner: str, repo: str, sha: str, status: GiteaCommitStatus
    ) -> None:
        """Create a commit status on ``owner/repo@sha``.

        The response body is not read: any 201 means the status was stored.

        Raises:
            GiteaApiError: If Gitea does not answer 201

        """
        url = f"{self._repo_url(owner, repo)}/statuses/{sha}"

        async with self.session.post(url, json=status.to_payload()) as response:
            if response.status != 201:
                text = await response.text()
                raise GiteaApiError(
                    f"Failed to create commit status: {response.status} {text}",
                    response.status,
                )

    async def fetch_branch_revision(
        self, owner: str, repo: str, head: SCMHead
    ) -> BranchRevision | None:
        """Fetch the commit at the tip of branch ``head``.

        Returns:
            The branch revision, or None if the branch does not exist

        """
        url = f"{self._repo_url(owner, repo)}/branches/{quote(head.name, safe='')}"

        async with self.session.get(url) as response:
            if response.status == 404:
                return None
            if response.status != 200:
                text = await response.text()
                raise GiteaApiError(
                    f"Failed to get branch: {response.status} {text}",
                    response.status,
                )

            data: Mapping[str, object] = await response.json()

        commit = data.get("commit")
        if not isinstance(commit, dict) or not isinstance(commit.get("id"), str):
            return None

        return BranchRevision(head=head, hash=commit["id"])

    async def fetch_pull_request_revision(
        self, owner: str, repo: str, head: SCMHead
    ) -> PullRequestRevision | None:
        """Fetch the head and base commits of pull request ``head``.

        Returns:
            The pull request revision, or None if the pull request does not exist

        """
        url = f"{self._repo_url(owner, repo)}/pulls/{head.pull_request}"

        async with self.session.get(url) as response:
            if response.status == 404:
                return None
            if response.status != 200:
                text = await response.text()
                raise GiteaApiError(
                    f"Failed to get pull request: {response.status} {text}",
                    response.status,
                )

            data: Mapping[str, object] = await response.json()

        origin = _branch_side(data.get("head"))
        target = _branch_side(data.get("base"))
        if origin is None or target is None:
            return None

        return PullRequestRevision(head=head, origin=origin, target=target)


def _branch_side(side: object) -> BranchRevision | None:
    """Convert the head or base object of a pull request payload."""
    if not isinstance(side, dict):
        return None

    ref = side.get("ref")
    sha = side.get("sha")
    if not isinstance(ref, str) or not isinstance(sha, str):
        return None

    return BranchRevision(head=SCMHead(name=ref), hash=sha)
