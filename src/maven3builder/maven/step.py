"""The Maven 3 build step and its registration record."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TextIO

from pydantic import BaseModel, Field

from maven3builder.core.errors import BuildAborted
from maven3builder.core.log import logger
from maven3builder.maven import cmdline, process
from maven3builder.maven.config import BuilderConfig, PluginConfig
from maven3builder.maven.context import BuildContext
from maven3builder.maven.installation import Installation, resolve
from maven3builder.maven.process import BuildResult


class StepDescriptor(BaseModel):
    """Host-wide registration record of the Maven 3 step.

    Holds what is shared by every configured instance of the step:
    the registered Maven installations and the plugin layout.
    """

    id: str = "maven3"
    display_name: str = "Invoke Maven 3"
    help_file: str = "/plugin/maven3/help.html"
    installations: list[Installation] = Field(default_factory=list)
    plugin: PluginConfig = Field(default_factory=PluginConfig)

    def is_applicable(self, job_type: str | None = None) -> bool:  # noqa: ARG002
        """The step can be added to any kind of job."""
        return True

    def new_instance(self, form_data: Mapping[str, str | None]) -> Maven3Builder:
        return Maven3Builder(BuilderConfig.from_mapping(form_data), self)


class StepRegistry:
    """Build steps the host can offer, by id."""

    def __init__(self):
        self._descriptors: dict[str, StepDescriptor] = {}

    def register(self, descriptor: StepDescriptor) -> None:
        self._descriptors[descriptor.id] = descriptor

    def get(self, step_id: str) -> StepDescriptor:
        """Retrieve a descriptor by id.

        Raises:
            KeyError: If no step is registered under step_id
        """
        return self._descriptors[step_id]

    def descriptors(self) -> list[StepDescriptor]:
        return list(self._descriptors.values())


class Maven3Builder:
    """Runs Maven 3 as one step of a build."""

    def __init__(self, config: BuilderConfig, descriptor: StepDescriptor):
        self.config = config
        self.descriptor = descriptor

    def get_installation(self) -> Installation | None:
        return resolve(self.config.maven_name, self.descriptor.installations)

    def perform(self, context: BuildContext, output: TextIO) -> BuildResult:
        """Build the command line, run Maven and report the result.

        Configuration problems are reported to the build log and fail
        the build without launching anything.

        Args:
            context: The running build
            output: Build log

        Returns:
            Result of the build step
        """
        installation = self.get_installation()
        if installation is not None:
            logger.info(
                "Using Maven installation {name} at {home}",
                name=installation.name,
                home=str(installation.home),
            )

        try:
            command_line = cmdline.build(
                self.config, installation, context, self.descriptor.plugin
            )
        except BuildAborted as e:
            logger.error("Build aborted: {reason}", reason=str(e))
            output.write(f"ERROR: {e}\n")
            return BuildResult.FAILURE

        with logger.span("maven3 {build}", build=context.display_name):
            result = process.run(command_line, output)

        logger.info("Build {build} finished: {result}",
                    build=context.display_name, result=result.value)
        return result
