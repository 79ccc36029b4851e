"""Build metadata handed to the build-info extractor.

The extractor runs inside the launched Maven JVM and reads its
configuration from system properties. collect() derives those
properties from the running build; the command-line builder emits
each one as ``-D<key>=<value>``.
"""

from __future__ import annotations

from maven3builder.core.log import logger
from maven3builder.maven.config import PluginConfig
from maven3builder.maven.context import BuildContext

ACTIVATE_RECORDER = "org.jfrog.build.extractor.maven.recorder.activate"

BUILD_INFO_PREFIX = "buildInfo."
# Deploy parameters: the extractor attaches these to deployed artifacts
DEPLOY_PARAM_PREFIX = BUILD_INFO_PREFIX + "deploy."

BUILD_NAME = "build.name"
BUILD_NUMBER = "build.number"
BUILD_STARTED = "build.started"
BUILD_URL = "build.url"
VCS_REVISION = "vcs.revision"
PARENT_BUILD_NAME = "build.parentName"
PARENT_BUILD_NUMBER = "build.parentNumber"
PRINCIPAL = "principal"
AGENT_NAME = "agent.name"
AGENT_VERSION = "agent.version"
PUBLISH_ARTIFACTS = "publish.artifacts"
PUBLISH_BUILD_INFO = "publish.buildInfo"
OUTPUT_FILE = "output.file"

# Environment variables that carry the checked out revision, in
# order of preference
VCS_REVISION_VARIABLES = ("SVN_REVISION", "GIT_COMMIT")

def prop(field: str) -> str:
    """Full system property name of a build-info field."""
    return BUILD_INFO_PREFIX + field


def deploy_prop(field: str) -> str:
    """Deploy-parameter mirror of a build-info field."""
    return DEPLOY_PARAM_PREFIX + field


def output_file(context: BuildContext):
    """Where the extractor writes the recorded build info."""
    return context.build_root / "maven3" / "buildinfo.json"


def vcs_revision(env: dict[str, str]) -> str | None:
    for name in VCS_REVISION_VARIABLES:
        value = env.get(name)
        if value and value.strip():
            return value
    return None


def collect(config: PluginConfig, context: BuildContext) -> dict[str, str]:
    """Build-info properties for one build, in emission order.

    Creates the parent directory of the output file so the launched
    process can write into it. If that fails the properties are still
    returned; the extractor then reports the problem from inside Maven.

    Args:
        config: Step plugin settings; supplies the agent name
        context: The running build

    Returns:
        Mapping of system property name to value
    """
    props: dict[str, str] = {}

    def mirrored(field: str, value: str) -> None:
        props[prop(field)] = value
        props[deploy_prop(field)] = value

    props[ACTIVATE_RECORDER] = "true"

    mirrored(BUILD_NAME, context.display_name)
    mirrored(BUILD_NUMBER, str(context.number))
    props[prop(BUILD_STARTED)] = str(context.start_millis)

    revision = vcs_revision(context.env)
    if revision is not None:
        mirrored(VCS_REVISION, revision)

    props[prop(BUILD_URL)] = context.url

    parent = context.upstream_cause()
    if parent is not None:
        mirrored(PARENT_BUILD_NAME, parent.upstream_project)
        mirrored(PARENT_BUILD_NUMBER, str(parent.upstream_build))

    user = context.user_name()
    if user is not None:
        props[prop(PRINCIPAL)] = user

    props[prop(AGENT_NAME)] = config.agent_name
    props[prop(AGENT_VERSION)] = context.host_version

    # This step never deploys; publishing is left to later steps
    props[prop(PUBLISH_ARTIFACTS)] = "false"
    props[prop(PUBLISH_BUILD_INFO)] = "false"

    target = output_file(context)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(
            "Cannot create build-info directory {path}: {error}",
            path=str(target.parent), error=str(e),
        )
    props[prop(OUTPUT_FILE)] = str(target.absolute())

    logger.debug(
        "Collected {count} build-info properties", count=len(props)
    )
    return props
