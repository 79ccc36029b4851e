#!/usr/bin/env python3
"""maven3builder CLI - run Maven 3 builds through classworlds."""

import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from maven3builder.command.installations import InstallationsCommand
from maven3builder.command.run import RunCommand
from maven3builder.core.config import State
from maven3builder.core.errors import Maven3BuilderError
from maven3builder.core.log import logger


class CliState(State):
    """Launch Maven 3 through the plexus-classworlds bootstrap.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.step.goals "clean install")
    2. maven3builder.yaml in the current directory
    3. .env file
    4. Environment variables
       (MAVEN3BUILDER_CONFIG__BUILD__NUMBER=42)

    The [JSON] options allow setting multiple values at once:
      --config.step '{"mavenName": "M3", "goals": "clean install"}'
    """

    run: CliSubCommand[RunCommand]
    installations: CliSubCommand[InstallationsCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes the file sink on exit
        with logger:
            try:
                exit_code = subcommand.run_workflow(self)
            except Maven3BuilderError as e:
                logger.error("{error}", error=str(e))
                print(f"ERROR: {e}", file=sys.stderr)
                exit_code = 1
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
