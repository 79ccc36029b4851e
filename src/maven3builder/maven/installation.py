"""Maven installations and selection of the one a step runs."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Installation(BaseModel):
    """A Maven distribution registered with the host."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Name the step configuration refers to")
    home: Path | None = Field(
        default=None,
        description="Maven home directory (MAVEN_HOME)",
    )

    @property
    def boot_dir(self) -> Path | None:
        """Directory holding the classworlds bootstrap jar."""
        if self.home is None:
            return None
        return self.home / "boot"


def resolve(
    name: str | None, installations: Sequence[Installation]
) -> Installation | None:
    """Find the installation a step should use.

    Args:
        name: Configured installation name, possibly empty or None
        installations: All installations known to the host

    Returns:
        The installation named ``name``; otherwise the first one
        registered; None when there are none at all.
    """
    for installation in installations:
        if installation.name == name:
            return installation
    return installations[0] if installations else None
