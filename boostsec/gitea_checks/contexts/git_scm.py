"""Context for runs checking out a plain Git remote."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from boostsec.gitea_checks.contexts.base import GiteaChecksContext, ValidationResult
from boostsec.gitea_checks.models.build import Run
from boostsec.gitea_checks.scm_facade import SCMFacade

GIT_COMMIT_ENV_NAME = "GIT_COMMIT"

# user@host:owner/repo, without a scheme
_SCP_LIKE_URL = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


@dataclass(frozen=True)
class GitRemote:
    """Server and repository parsed from a Git remote URL."""

    server_url: str
    owner: str
    repo: str

    @property
    def repository(self) -> str:
        """Full repository name."""
        return f"{self.owner}/{self.repo}"


def parse_remote_url(url: str | None) -> GitRemote | None:
    """Parse a Git remote URL into server, owner and repository.

    Supports ``scheme://host/owner/repo[.git]`` and scp-like
    ``user@host:owner/repo[.git]`` remotes. Only the last two path segments
    are used for owner and repository; for http(s) remotes the segments
    before them are kept as part of the server URL. SSH remotes are assumed
    to be served over https on the same host.

    Returns:
        The parsed remote, or None if the URL has fewer than two path segments

    """
    if url is None or not url.strip():
        return None
    url = url.strip()

    keep_prefix = False
    if "://" in url:
        parts = urlsplit(url)
        host = parts.netloc.rpartition("@")[2]
        if not host:
            return None
        path = parts.path
        keep_prefix = parts.scheme in ("http", "https")
        if keep_prefix:
            base_url = f"{parts.scheme}://{host}"
        else:
            base_url = f"https://{parts.hostname}"
    else:
        match = _SCP_LIKE_URL.match(url)
        if match is None:
            return None
        path = match["path"]
        base_url = f"https://{match['host']}"

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        return None

    owner, repo = segments[-2:]
    prefix = "/".join(segments[:-2])
    if prefix and keep_prefix:
        base_url = f"{base_url}/{prefix}"

    return GitRemote(server_url=base_url, owner=owner, repo=repo)


class GitSCMChecksContext(GiteaChecksContext):
    """Resolves repository and commit from the Git SCM a run checked out."""

    def __init__(self, run: Run, url: str | None, scm_facade: SCMFacade) -> None:
        """Initialize context for ``run``."""
        super().__init__(run.job, url, scm_facade, run)
        self._run = run

    @property
    def remote_url(self) -> str | None:
        """URL of the first remote of the run's Git SCM."""
        scm = self.scm_facade.find_git_scm(self._run)
        if scm is None:
            return None
        return self.scm_facade.get_user_remote_config(scm).url

    def _require_remote(self) -> GitRemote:
        remote = parse_remote_url(self.remote_url)
        if remote is None:
            raise RuntimeError(
                f"Invalid repository url: {self.remote_url} for job: {self.job.name}"
            )
        return remote

    @property
    def head_sha(self) -> str:
        """Commit the run checked out, from ``GIT_COMMIT``."""
        sha = self._run.environment.get(GIT_COMMIT_ENV_NAME, "")
        if not sha.strip():
            raise RuntimeError(f"No SHA found for job: {self.job.name}")
        return sha

    @property
    def repo_owner(self) -> str:
        """Owner parsed from the remote URL."""
        return self._require_remote().owner

    @property
    def repo(self) -> str:
        """Repository parsed from the remote URL."""
        return self._require_remote().repo

    @property
    def server_url(self) -> str:
        """Server derived from the remote URL."""
        return self._require_remote().server_url

    @property
    def credentials_id(self) -> str | None:
        """Credentials configured on the first remote."""
        scm = self.scm_facade.find_git_scm(self._run)
        if scm is None:
            return None
        return self.scm_facade.get_user_remote_config(scm).credentials_id

    def validate(self) -> ValidationResult:
        """Check Git SCM, remote URL, credentials and head sha, in that order."""
        result = ValidationResult()
        result.log("Trying to resolve checks parameters from Git SCM...")

        if self.scm_facade.find_git_scm(self._run) is None:
            return result.reject("Job does not use Git SCM")

        remote = parse_remote_url(self.remote_url)
        if remote is None:
            return result.reject(f"Invalid repository url: {self.remote_url}")

        if not self._validate_credentials(result):
            return result

        if not self._run.environment.get(GIT_COMMIT_ENV_NAME, "").strip():
            return result.reject(f"No HEAD SHA found for {remote.repository}")

        return result
