"""Connection parameters for a service's server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ServerConfig(BaseModel):
    """SSH login for the host a service runs on (the ``*_SERVER_*`` quartet)."""

    model_config = ConfigDict(frozen=True)

    user: str = Field(min_length=1)
    password: SecretStr
    host: str = Field(min_length=1)
    port: str = Field(min_length=1)

    @property
    def login(self) -> str:
        return f"{self.user}@{self.host}"
