"""Pytest configuration and fixtures for maven3builder tests."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from maven3builder.core.log import ConsoleSink, setup_logger
from maven3builder.maven.config import PluginConfig
from maven3builder.maven.context import BuildContext
from maven3builder.maven.installation import Installation


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure console-only logging for the test session."""
    test_log_root = Path(tempfile.gettempdir()) / "maven3builder-tests"
    setup_logger(
        log_root=test_log_root,
        build_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def maven_home(tmp_path):
    """A Maven 3 home with a classworlds jar and bin/m2.conf."""
    home = tmp_path / "maven3"
    (home / "boot").mkdir(parents=True)
    (home / "boot" / "plexus-classworlds-2.4.jar").write_bytes(b"")
    (home / "bin").mkdir()
    (home / "bin" / "m2.conf").write_text("main is org.apache.maven.cli.MavenCli from plexus.core\n")
    return home


@pytest.fixture
def installation(maven_home):
    return Installation(name="M3", home=maven_home)


@pytest.fixture
def plugin(tmp_path):
    """Plugin layout with a classworlds.conf and one extractor jar."""
    plugin_dir = tmp_path / "plugin"
    lib = plugin_dir / "lib"
    lib.mkdir(parents=True)
    (lib / "build-info-extractor-maven3.jar").write_bytes(b"")
    conf = plugin_dir / "classworlds.conf"
    conf.write_text("main is org.apache.maven.cli.MavenCli from plexus.core\n")
    return PluginConfig(classworlds_conf=conf, extractor_lib_dir=lib)


@pytest.fixture
def context(tmp_path):
    """A POSIX build with no JDK, no causes and an empty environment."""
    module_root = tmp_path / "workspace"
    module_root.mkdir()
    return BuildContext(
        display_name="app #7",
        number=7,
        timestamp=datetime(2024, 1, 2, 3, 4, 5),
        url="http://ci.example.com/job/app/7/",
        env={"BUILD_NUMBER": "7"},
        module_root=module_root,
        build_root=tmp_path / "builds" / "7",
        host_version="1.380",
        is_unix=True,
    )
