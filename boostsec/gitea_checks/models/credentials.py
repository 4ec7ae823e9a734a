"""Credentials used to authenticate against a Gitea server."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator


class Credentials(BaseModel):
    """Credentials stored by the build platform, looked up by id."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Credentials identifier")
    description: str | None = None
    token: SecretStr | None = Field(default=None, description="Gitea access token")
    username: str | None = None
    password: SecretStr | None = None

    @model_validator(mode="after")
    def _check_secret(self) -> "Credentials":
        if self.token is None and (self.username is None or self.password is None):
            raise ValueError(
                f"Credentials '{self.id}' need either a token or a username "
                "and password"
            )
        return self
