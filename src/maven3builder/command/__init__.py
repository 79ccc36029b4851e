"""CLI command modules for maven3builder."""

from maven3builder.command.installations import InstallationsCommand
from maven3builder.command.run import RunCommand

__all__ = ["InstallationsCommand", "RunCommand"]
