"""Tests for step configuration and host settings loading."""

from datetime import datetime
from pathlib import Path

import pytest

from maven3builder.core.config import BuildConfig, Config, State
from maven3builder.core.errors import ConfigurationError
from maven3builder.core.log import ConsoleSink, Logger
from maven3builder.maven.config import BuilderConfig
from maven3builder.maven.context import UpstreamCause, UserCause
from maven3builder.maven.macro import replace_macro


@pytest.fixture
def quiet_logger():
    return Logger(console=ConsoleSink(enabled=False))


def test_builder_config_round_trips_form_keys():
    form = {"mavenName": "M3", "rootPom": "app/pom.xml",
            "goals": "verify", "mavenOpts": "-Xmx1g"}

    config = BuilderConfig.from_mapping(form)

    assert config.maven_name == "M3"
    assert config.root_pom == "app/pom.xml"
    assert config.maven_opts == "-Xmx1g"
    assert config.to_mapping() == form


def test_builder_config_missing_keys_are_none():
    config = BuilderConfig.from_mapping({})

    assert config.to_mapping() == {
        "mavenName": None, "rootPom": None, "goals": None, "mavenOpts": None
    }
    assert config.pom == "pom.xml"


@pytest.mark.parametrize("value,expected", [
    ("-Dn=$BUILD_NUMBER", "-Dn=12"),
    ("-Dn=${BUILD_NUMBER}", "-Dn=12"),
    ("-Dv=${project.version}", "-Dv=${project.version}"),
    ("-Dx=$UNKNOWN", "-Dx=$UNKNOWN"),
    ("plain", "plain"),
    (None, None),
])
def test_replace_macro(value, expected):
    assert replace_macro(value, {"BUILD_NUMBER": "12"}) == expected


def test_build_environment_has_build_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("HOST_ONLY", "yes")
    build = BuildConfig(
        job_name="app", number=12, jdk_home=tmp_path,
        variables={"RELEASE": "true"},
    )

    env = build.environment()

    assert env["HOST_ONLY"] == "yes"
    assert env["BUILD_NUMBER"] == "12"
    assert env["JOB_NAME"] == "app"
    assert env["BUILD_DISPLAY_NAME"] == "app #12"
    assert env["BUILD_URL"] == "http://localhost:8080/job/app/12/"
    assert env["JAVA_HOME"] == str(tmp_path)
    assert env["RELEASE"] == "true"


def test_to_context(tmp_path):
    (tmp_path / "jdk" / "bin").mkdir(parents=True)
    build = BuildConfig(
        job_name="app",
        number=3,
        module_root=tmp_path,
        builds_dir=tmp_path / "builds",
        jdk_home=tmp_path / "jdk",
        causes=[UserCause(user_name="ann")],
    )
    started = datetime(2024, 5, 1, 12, 0, 0)

    context = build.to_context(timestamp=started)

    assert context.display_name == "app #3"
    assert context.number == 3
    assert context.timestamp == started
    assert context.jdk_bin_dir == tmp_path / "jdk" / "bin"
    assert context.build_root == tmp_path / "builds" / "app" / "3"
    assert context.module_root == tmp_path
    assert context.user_name() == "ann"


def test_to_context_rejects_jdk_without_bin(tmp_path):
    build = BuildConfig(jdk_home=tmp_path / "nojdk")

    with pytest.raises(ConfigurationError, match="no bin directory"):
        build.to_context()


def test_state_loads_yaml(monkeypatch, tmp_path):
    (tmp_path / "maven3builder.yaml").write_text(
        "config:\n"
        "  logger:\n"
        "    console:\n"
        "      enabled: false\n"
        "  installations:\n"
        "    - name: M3\n"
        "      home: /opt/maven3\n"
        "  step:\n"
        "    mavenName: M3\n"
        "    goals: clean install\n"
        "  build:\n"
        "    job_name: app\n"
        "    number: 5\n"
        "    causes:\n"
        "      - kind: upstream\n"
        "        upstream_project: platform\n"
        "        upstream_build: 9\n"
    )
    monkeypatch.chdir(tmp_path)

    state = State()

    config = state.config
    assert config.installations[0].home == Path("/opt/maven3")
    assert config.step.maven_name == "M3"
    assert config.step.goals == "clean install"
    assert config.build.number == 5
    assert config.build.causes == [
        UpstreamCause(upstream_project="platform", upstream_build=9)
    ]
    state.close()


def test_state_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MAVEN3BUILDER_CONFIG__BUILD__NUMBER", "42")
    monkeypatch.setenv("MAVEN3BUILDER_CONFIG__LOGGER__CONSOLE__ENABLED", "false")

    state = State()

    assert state.config.build.number == 42
    state.close()


def test_config_defaults(quiet_logger):
    config = Config(logger=quiet_logger)

    assert config.installations == []
    assert config.plugin.build_info is True
    assert config.plugin.classworlds_conf.name == "classworlds.conf"
    config.close()
