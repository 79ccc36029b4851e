"""Configuration of the Maven 3 build step."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import ConfigDict, Field

from maven3builder.core.base import BaseConfig

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"

DEFAULT_ROOT_POM = "pom.xml"


class BuilderConfig(BaseConfig):
    """Settings of one Maven 3 build step.

    Bound once from form or persisted data and never changed. The
    four keys of the persisted form are the field aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    maven_name: str | None = Field(
        default=None,
        alias="mavenName",
        description="Name of the Maven installation to run",
    )
    root_pom: str | None = Field(
        default=None,
        alias="rootPom",
        description="POM file to build, relative to the module root",
    )
    goals: str | None = Field(
        default=None,
        description="Whitespace separated goals and options",
    )
    maven_opts: str | None = Field(
        default=None,
        alias="mavenOpts",
        description="JVM options for the Maven process",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, str | None]) -> BuilderConfig:
        """Bind a step from its persisted/form key/value map."""
        return cls.model_validate(dict(data))

    def to_mapping(self) -> dict[str, str | None]:
        """Serialize to the persisted/form key/value map."""
        return self.model_dump(by_alias=True)

    @property
    def pom(self) -> str:
        if self.root_pom and self.root_pom.strip():
            return self.root_pom.strip()
        return DEFAULT_ROOT_POM


class PluginConfig(BaseConfig):
    """Where the step finds the files it ships, and how it wires them
    into the Maven process."""

    build_info: bool = Field(
        default=True,
        description=(
            "Launch Maven with the shipped classworlds configuration so "
            "the build-info extractor records the build. When false, "
            "Maven's own bin/m2.conf is used"
        ),
    )
    classworlds_conf: Path = Field(
        default=RESOURCES_DIR / "classworlds.conf",
        description="Classworlds configuration shipped with the step",
    )
    extractor_lib_dir: Path = Field(
        default=RESOURCES_DIR / "lib",
        description="Directory holding the build-info extractor jars",
    )
    append_extractor_jars: bool = Field(
        default=False,
        description=(
            "Also put the extractor jars on the boot classpath. The "
            "shipped classworlds configuration loads them through "
            "m3plugin.lib, so this is normally off"
        ),
    )
    agent_name: str = Field(
        default="hudson",
        description="Agent name recorded in the build info",
    )
