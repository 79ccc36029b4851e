"""Tests for the run and installations commands."""

import os
import platform

import pytest

from maven3builder.command.installations import InstallationsCommand
from maven3builder.command.run import RunCommand, register_steps
from maven3builder.core.config import BuildConfig, Config, State
from maven3builder.core.errors import BuildAborted
from maven3builder.core.log import ConsoleSink, Logger
from maven3builder.maven.cmdline import CLASSWORLDS_LAUNCHER
from maven3builder.maven.config import BuilderConfig
from maven3builder.maven.installation import Installation


@pytest.fixture
def state(tmp_path, installation, plugin):
    module_root = tmp_path / "workspace"
    module_root.mkdir(exist_ok=True)
    config = Config(
        logger=Logger(console=ConsoleSink(enabled=False)),
        log_root=tmp_path / "logs",
        installations=[Installation(name="M2", home=tmp_path / "m2"), installation],
        step=BuilderConfig(mavenName="M3", goals="clean install"),
        plugin=plugin,
        build=BuildConfig(
            job_name="app",
            number=4,
            module_root=module_root,
            builds_dir=tmp_path / "builds",
        ),
    )
    state = State(config=config)
    yield state
    state.close()


def test_register_steps(state, installation):
    descriptor = register_steps(state.config).get("maven3")

    assert descriptor.installations[1] is installation


def test_installations_marks_resolved(state, capsys):
    exit_code = InstallationsCommand().run_workflow(state)

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert lines[0].startswith("  M2")
    assert lines[1].startswith("* M3")


def test_installations_empty(state, capsys):
    state.config.installations = []

    assert InstallationsCommand().run_workflow(state) == 1
    assert "No Maven installations" in capsys.readouterr().out


def test_dry_run_prints_command_line(state, capsys):
    exit_code = RunCommand(dry_run=True).run_workflow(state)

    out = capsys.readouterr().out.strip()
    assert exit_code == 0
    assert out.endswith(f"{CLASSWORLDS_LAUNCHER} -f pom.xml clean install")


def test_dry_run_raises_configuration_error(state):
    state.config.installations = [Installation(name="M3")]

    with pytest.raises(BuildAborted):
        RunCommand(dry_run=True).run_workflow(state)


def test_run_failure_is_written_to_build_log(state, tmp_path):
    state.config.installations = []

    exit_code = RunCommand().run_workflow(state)

    log = tmp_path / "builds" / "app" / "4" / "log"
    assert exit_code == 1
    content = log.read_text()
    assert "ERROR: Maven version is not configured" in content
    assert content.endswith("Finished: FAILURE\n")


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX shell script")
def test_run_success(state, tmp_path):
    jdk = tmp_path / "jdk"
    (jdk / "bin").mkdir(parents=True)
    java = jdk / "bin" / "java"
    java.write_text('#!/bin/sh\necho "maven says hi"\nexit 0\n')
    java.chmod(0o755)
    state.config.build = state.config.build.model_copy(update={"jdk_home": jdk})

    exit_code = RunCommand().run_workflow(state)

    log = tmp_path / "builds" / "app" / "4" / "log"
    assert exit_code == 0
    assert log.read_text() == "maven says hi\nFinished: SUCCESS\n"
    assert os.path.isdir(tmp_path / "builds" / "app" / "4" / "maven3")
