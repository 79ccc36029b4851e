"""Command line that launches Maven 3 through plexus-classworlds.

Classworlds reads its arguments positionally, so the order built
here is part of the contract:

    [cmd.exe /C] java <opts> -cp <classworlds jar> -Dmaven.home=...
    [-Dm3plugin.lib=...] -Dclassworlds.conf=... -D<build info>...
    <expanded opts> Launcher [-f <pom>] <goals>
"""

from __future__ import annotations

import shlex
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from maven3builder.core.errors import BuildAborted
from maven3builder.core.log import logger
from maven3builder.maven import buildinfo
from maven3builder.maven.config import BuilderConfig, PluginConfig
from maven3builder.maven.context import BuildContext
from maven3builder.maven.installation import Installation
from maven3builder.maven.macro import replace_macro

CLASSWORLDS_LAUNCHER = "org.codehaus.plexus.classworlds.launcher.Launcher"
CLASSWORLDS_JAR_PREFIX = "plexus-classworlds"


class CommandLine(BaseModel):
    """Everything needed to start the Maven process."""

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...]
    env: dict[str, str]
    workdir: Path

    def __str__(self) -> str:
        return shlex.join(self.args)


def tokenize(value: str | None, posix: bool = True) -> list[str]:
    """Split on whitespace, keeping quoted sections together.

    Quotes are removed from the tokens on every host. Backslashes are
    escapes only on POSIX hosts, so Windows paths pass through
    unchanged. A quote that is never closed is kept as a literal
    character and the value is split on whitespace alone.
    """
    if not value or not value.strip():
        return []
    lexer = shlex.shlex(value, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    if not posix:
        lexer.escape = ""
    try:
        return list(lexer)
    except ValueError:
        logger.debug("Unbalanced quote in {value}, splitting on whitespace",
                     value=value)
        return value.split()


def find_classworlds_jar(boot_dir: Path) -> Path:
    """Locate the classworlds bootstrap jar of an installation.

    Raises:
        BuildAborted: If no file in boot_dir starts with the
            classworlds prefix
    """
    candidates = []
    if boot_dir.is_dir():
        candidates = sorted(
            path for path in boot_dir.iterdir()
            if path.name.startswith(CLASSWORLDS_JAR_PREFIX)
        )
    if not candidates:
        raise BuildAborted(
            f"Couldn't find classworlds jar under {boot_dir.absolute()}"
        )
    if len(candidates) > 1:
        logger.debug(
            "Several classworlds jars in {boot_dir}, using {jar}",
            boot_dir=str(boot_dir),
            jar=candidates[0].name,
            ignored=[path.name for path in candidates[1:]],
        )
    return candidates[0]


def java_command(context: BuildContext) -> str:
    if context.jdk_bin_dir is not None:
        return str((context.jdk_bin_dir / "java").absolute())
    return "java"


def build_classpath(
    classworlds_jar: Path, plugin: PluginConfig, is_unix: bool
) -> str:
    """The single classpath string handed to ``-cp``."""
    entries = [str(classworlds_jar.absolute())]
    if plugin.build_info and plugin.append_extractor_jars:
        entries.extend(
            str(jar.absolute())
            for jar in sorted(plugin.extractor_lib_dir.glob("*.jar"))
        )
    separator = ":" if is_unix else ";"
    return separator.join(entries)


def classworlds_conf(
    installation: Installation, plugin: PluginConfig
) -> Path:
    """Resolve the classworlds configuration the launcher reads.

    Raises:
        BuildAborted: If the configuration file does not exist
    """
    if plugin.build_info:
        conf = plugin.classworlds_conf
    else:
        conf = installation.home / "bin" / "m2.conf"
    if not conf.is_file():
        raise BuildAborted(
            "Unable to locate classworlds configuration file under "
            f"{conf.absolute()}"
        )
    return conf


def build(
    config: BuilderConfig,
    installation: Installation | None,
    context: BuildContext,
    plugin: PluginConfig | None = None,
) -> CommandLine:
    """Assemble the Maven command line for a build.

    Args:
        config: The step's configuration
        installation: Installation resolved for the step
        context: The running build
        plugin: Location of the shipped files; defaults to the
            packaged resources

    Returns:
        CommandLine running in the build's module root

    Raises:
        BuildAborted: If the installation or the bootstrap files it
            needs are missing
    """
    plugin = plugin or PluginConfig()

    if installation is None:
        raise BuildAborted(
            "Maven version is not configured for this project. "
            "Can't determine which Maven to run"
        )
    if installation.home is None:
        raise BuildAborted(
            f"Maven '{installation.name}' doesn't have its home set"
        )

    posix = context.is_unix
    args: list[str] = []

    if not posix:
        args += ["cmd.exe", "/C"]

    args.append(java_command(context))
    args += tokenize(config.maven_opts, posix)

    classworlds_jar = find_classworlds_jar(installation.boot_dir)

    if plugin.build_info and not plugin.extractor_lib_dir.is_dir():
        raise BuildAborted(
            "Couldn't find maven3 extractor libraries under "
            f"{plugin.extractor_lib_dir.absolute()}"
        )

    args += ["-cp", build_classpath(classworlds_jar, plugin, posix)]
    args.append(f"-Dmaven.home={installation.home}")

    if plugin.build_info:
        args.append(f"-Dm3plugin.lib={plugin.extractor_lib_dir.absolute()}")

    conf = classworlds_conf(installation, plugin)
    args.append(f"-Dclassworlds.conf={conf.absolute()}")

    properties = buildinfo.collect(plugin, context)
    args += [f"-D{key}={value}" for key, value in properties.items()]

    expanded_opts = replace_macro(
        config.maven_opts, context.macro_variables()
    )
    args += tokenize(expanded_opts, posix)

    args.append(CLASSWORLDS_LAUNCHER)

    if plugin.build_info:
        args += ["-f", config.pom]

    args += tokenize(config.goals, posix)

    return CommandLine(
        args=tuple(args),
        env=dict(context.env),
        workdir=context.module_root,
    )
