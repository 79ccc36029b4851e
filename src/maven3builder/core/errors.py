"""Exceptions raised by the Maven 3 build step."""


class Maven3BuilderError(Exception):
    """Base class for all build step errors."""


class BuildAborted(Maven3BuilderError):
    """The build cannot start because the step is misconfigured.

    Raised before any process is launched: no usable Maven
    installation, no classworlds jar in the boot directory, or a
    missing classworlds configuration. The message is shown to the
    operator as-is.
    """


class ConfigurationError(Maven3BuilderError):
    """Host configuration could not be turned into a build."""
