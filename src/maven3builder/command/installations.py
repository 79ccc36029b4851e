"""Installations command - shows the Maven installations the host knows."""

from pydantic import BaseModel

from maven3builder.maven.installation import resolve


class InstallationsCommand(BaseModel):
    """List registered Maven installations.

    The installation the step would run (step.mavenName, or the
    first one when that name is not registered) is marked with '*'.
    """

    def run_workflow(self, state) -> int:
        """Print the installations.

        Returns:
            Exit code: 0, or 1 when no installation is registered
        """
        config = state.config
        selected = resolve(config.step.maven_name, config.installations)
        if selected is None:
            print("No Maven installations configured")
            return 1

        for installation in config.installations:
            marker = "*" if installation is selected else " "
            home = installation.home if installation.home else "(home not set)"
            print(f"{marker} {installation.name}\t{home}")
        return 0
