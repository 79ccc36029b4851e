"""Maven 3 build step: installation lookup, command line, process."""

from maven3builder.maven.cmdline import CommandLine
from maven3builder.maven.config import BuilderConfig, PluginConfig
from maven3builder.maven.context import (
    BuildContext,
    OtherCause,
    UpstreamCause,
    UserCause,
)
from maven3builder.maven.installation import Installation, resolve
from maven3builder.maven.process import BuildResult
from maven3builder.maven.step import Maven3Builder, StepDescriptor, StepRegistry

__all__ = [
    "BuildContext",
    "BuildResult",
    "BuilderConfig",
    "CommandLine",
    "Installation",
    "Maven3Builder",
    "OtherCause",
    "PluginConfig",
    "StepDescriptor",
    "StepRegistry",
    "UpstreamCause",
    "UserCause",
    "resolve",
]
