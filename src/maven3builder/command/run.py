"""Run command - performs the Maven 3 step for the configured build."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from maven3builder.core.buildlog import BuildLog
from maven3builder.core.log import logger
from maven3builder.maven import cmdline
from maven3builder.maven.process import BuildResult
from maven3builder.maven.step import StepDescriptor, StepRegistry


def register_steps(config) -> StepRegistry:
    """Registry holding the Maven 3 step, set up from host config."""
    registry = StepRegistry()
    registry.register(StepDescriptor(
        installations=config.installations,
        plugin=config.plugin,
    ))
    return registry


class RunCommand(BaseModel):
    """Run Maven 3 for the configured build.

    Resolves the Maven installation named by step.mavenName, builds
    the classworlds command line, runs it in build.module_root and
    writes its output to the build log under build.builds_dir.
    Exits 0 when Maven succeeds and 1 otherwise.
    """

    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(
        default=False,
        alias="dry-run",
        description="Print the command line instead of running it",
    )

    def run_workflow(self, state) -> int:
        """Perform the step.

        Args:
            state: State instance

        Returns:
            Exit code (0=success)
        """
        config = state.config
        registry = register_steps(config)
        step = registry.get("maven3").new_instance(config.step.to_mapping())
        context = config.build.to_context()

        if self.dry_run:
            command_line = cmdline.build(
                step.config,
                step.get_installation(),
                context,
                step.descriptor.plugin,
            )
            print(command_line)
            return 0

        with BuildLog(context.build_root) as build_log:
            result = step.perform(context, build_log)
            build_log.write(f"Finished: {result.value}\n")

        logger.info("Build log: {path}", path=str(build_log.log_file))
        return 0 if result is BuildResult.SUCCESS else 1


__all__ = ["RunCommand", "register_steps"]
