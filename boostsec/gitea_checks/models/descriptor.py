"""Build descriptor files describing a job, an optional run and credentials."""

from collections.abc import Mapping

from pydantic import BaseModel, Field, SecretStr

from boostsec.gitea_checks.models.build import Job, Run
from boostsec.gitea_checks.models.credentials import Credentials
from boostsec.gitea_checks.models.scm import SCMRevisionAction


class CredentialsEntry(BaseModel):
    """Credentials entry whose secrets may come from environment variables."""

    id: str = Field(..., description="Credentials identifier")
    description: str | None = None
    token: SecretStr | None = None
    token_env: str | None = Field(
        default=None, description="Environment variable holding the token"
    )
    username: str | None = None
    password: SecretStr | None = None
    password_env: str | None = Field(
        default=None, description="Environment variable holding the password"
    )

    def resolve(self, environ: Mapping[str, str]) -> Credentials:
        """Build credentials, reading referenced environment variables.

        Raises:
            ValueError: If a referenced variable is not set

        """
        token = self.token
        if token is None and self.token_env:
            token = SecretStr(_require_env(environ, self.token_env, self.id))

        password = self.password
        if password is None and self.password_env:
            password = SecretStr(_require_env(environ, self.password_env, self.id))

        return Credentials(
            id=self.id,
            description=self.description,
            token=token,
            username=self.username,
            password=password,
        )


def _require_env(environ: Mapping[str, str], name: str, credentials_id: str) -> str:
    value = environ.get(name)
    if not value:
        raise ValueError(
            f"Environment variable {name} for credentials '{credentials_id}' is not set"
        )
    return value


class RunEntry(BaseModel):
    """Run section of a build descriptor."""

    number: int = Field(..., ge=0)
    url: str | None = None
    environment: dict[str, str] = Field(default_factory=dict)
    revision_actions: list[SCMRevisionAction] = Field(default_factory=list)


class BuildDescriptor(BaseModel):
    """Complete build descriptor loaded from a YAML file."""

    job: Job = Field(..., description="Job configuration")
    run: RunEntry | None = Field(default=None, description="Run being reported")
    credentials: list[CredentialsEntry] = Field(default_factory=list)

    def build_run(self) -> Run | None:
        """Return the described run attached to its job, if any."""
        if self.run is None:
            return None
        return Run(job=self.job, **self.run.model_dump())
