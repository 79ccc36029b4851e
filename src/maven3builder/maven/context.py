"""Facts about the running build, supplied by the host."""

from __future__ import annotations

import platform
from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class UpstreamCause(BaseModel):
    """The build was triggered by another build."""

    kind: Literal["upstream"] = "upstream"
    upstream_project: str
    upstream_build: int


class UserCause(BaseModel):
    """The build was started by a user."""

    kind: Literal["user"] = "user"
    user_name: str


class OtherCause(BaseModel):
    """Any other trigger (timer, SCM poll, remote call...)."""

    kind: Literal["other"] = "other"
    description: str = ""


Cause = Annotated[
    UpstreamCause | UserCause | OtherCause, Field(discriminator="kind")
]


def is_unix_host() -> bool:
    return platform.system() != 'Windows'


class BuildContext(BaseModel):
    """Read-only view of one build execution.

    Everything the step needs from the host: identity and timing of
    the build, where it runs, which JDK it uses and why it was
    triggered.
    """

    model_config = ConfigDict(frozen=True)

    display_name: str = Field(description="Build display name")
    number: int = Field(description="Build number")
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="Time the build started",
    )
    url: str = Field(default="", description="Public URL of the build")
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables of the build",
    )
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Build variables available to macro substitution",
    )
    jdk_bin_dir: Path | None = Field(
        default=None,
        description="bin directory of the JDK configured for the build",
    )
    causes: list[Cause] = Field(default_factory=list)
    module_root: Path = Field(
        default=Path("."),
        description="Directory the build tool runs in",
    )
    build_root: Path = Field(
        description="Directory holding this build's records",
    )
    host_version: str = Field(default="", description="Version of the host")
    is_unix: bool = Field(default_factory=is_unix_host)

    @property
    def start_millis(self) -> int:
        return int(self.timestamp.timestamp() * 1000)

    def upstream_cause(self) -> UpstreamCause | None:
        for cause in self.causes:
            if isinstance(cause, UpstreamCause):
                return cause
        return None

    def user_name(self) -> str | None:
        """Name of the triggering user; the last user cause wins."""
        user = None
        for cause in self.causes:
            if isinstance(cause, UserCause):
                user = cause.user_name
        return user

    def macro_variables(self) -> dict[str, str]:
        """Environment overlaid with build variables."""
        return {**self.env, **self.variables}
