"""Application state and configuration."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import platformdirs
from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from maven3builder.core.base import BaseConfig
from maven3builder.core.errors import ConfigurationError
from maven3builder.core.log import Logger
from maven3builder.maven.config import BuilderConfig, PluginConfig
from maven3builder.maven.context import BuildContext, Cause
from maven3builder.maven.installation import Installation

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class BuildConfig(BaseConfig):
    """The build this host runs the step for."""

    job_name: str = Field(
        default="maven3",
        description="Name of the job the build belongs to",
    )
    number: int = Field(default=1, description="Build number")
    display_name: str | None = Field(
        default=None,
        description="Build display name (defaults to '<job> #<number>')",
    )
    root_url: str = Field(
        default="http://localhost:8080/",
        description="Public URL of the host",
    )
    module_root: Path = Field(
        default_factory=Path.cwd,
        description="Directory Maven runs in",
    )
    builds_dir: Path = Field(
        default=Path(".maven3builder") / "builds",
        description="Directory holding one record directory per build",
    )
    jdk_home: Path | None = Field(
        default=None,
        description="JDK to run Maven with; PATH lookup of java if unset",
    )
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Build variables, also exported to the environment",
    )
    causes: list[Cause] = Field(
        default_factory=list,
        description="Why the build was triggered",
    )
    host_version: str = Field(
        default="1.0",
        description="Host version reported to the build-info extractor",
    )

    @property
    def name(self) -> str:
        return self.display_name or f"{self.job_name} #{self.number}"

    @property
    def url(self) -> str:
        return f"{self.root_url.rstrip('/')}/job/{self.job_name}/{self.number}/"

    @property
    def build_root(self) -> Path:
        return self.builds_dir / self.job_name / str(self.number)

    def environment(self) -> dict[str, str]:
        """Environment snapshot for the build.

        The host environment, overlaid with the standard build
        variables and the configured ones.
        """
        env = dict(os.environ)
        env.update({
            "BUILD_NUMBER": str(self.number),
            "BUILD_ID": str(self.number),
            "BUILD_DISPLAY_NAME": self.name,
            "BUILD_URL": self.url,
            "JOB_NAME": self.job_name,
        })
        if self.jdk_home is not None:
            env["JAVA_HOME"] = str(self.jdk_home)
        env.update(self.variables)
        return env

    def to_context(self, timestamp: datetime | None = None) -> BuildContext:
        """Snapshot this build for the step.

        Raises:
            ConfigurationError: If the configured JDK has no bin
                directory
        """
        jdk_bin_dir = None
        if self.jdk_home is not None:
            jdk_bin_dir = self.jdk_home / "bin"
            if not jdk_bin_dir.is_dir():
                raise ConfigurationError(
                    f"JDK home {self.jdk_home} has no bin directory"
                )

        return BuildContext(
            display_name=self.name,
            number=self.number,
            timestamp=timestamp or datetime.now(),
            url=self.url,
            env=self.environment(),
            variables=dict(self.variables),
            jdk_bin_dir=jdk_bin_dir,
            causes=list(self.causes),
            module_root=self.module_root,
            build_root=self.build_root,
            host_version=self.host_version,
        )


class Config(BaseConfig):
    """Host configuration loaded from YAML/env/CLI.

    Inherits from BaseConfig so closing it closes the logger.
    """
    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    installations: list[Installation] = Field(
        default_factory=list,
        description="Maven installations registered with the host",
    )
    step: BuilderConfig = Field(
        default_factory=BuilderConfig,
        description="Maven 3 step settings (mavenName, rootPom, goals, mavenOpts)",
    )
    plugin: PluginConfig = Field(
        default_factory=PluginConfig,
        description="Files shipped with the step and how they are used",
    )
    build: BuildConfig = Field(
        default_factory=BuildConfig,
        description="The build to run",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "maven3builder"
        ),
        description="Root directory for log files",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Initialize the global logger singleton once config is
        loaded."""
        from maven3builder.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            build_name=f"{self.build.job_name}-{self.build.number}",
            console=self.logger.console,
            file=self.logger.file,
            level=self.logger.level,
        )
        return self

    def close(self):
        """Close the global logger, then the remaining children."""
        from maven3builder.core.log import logger
        logger.close()

        super().close()


# ============================================================
# STATE
# ============================================================

class State(BaseSettings):
    """Complete application state.

    Loaded, in priority order, from init arguments, the CLI (when
    run through CliApp), maven3builder.yaml, .env and environment
    variables (MAVEN3BUILDER_CONFIG__BUILD__NUMBER=42).
    """

    config: Config = Field(
        default_factory=Config,
        description="Host configuration (from YAML/env/CLI)",
    )

    model_config = SettingsConfigDict(
        yaml_file="maven3builder.yaml",
        env_file=".env",
        env_prefix="MAVEN3BUILDER_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority (highest first): init args, YAML file, .env,
        environment, file secrets."""
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    def close(self):
        self.config.close()


__all__ = ["State", "Config", "BuildConfig"]
