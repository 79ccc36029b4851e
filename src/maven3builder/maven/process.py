"""Run the Maven process and map its exit status to a build result."""

from __future__ import annotations

import subprocess
from enum import Enum
from typing import TextIO

from maven3builder.core.log import logger
from maven3builder.maven.cmdline import CommandLine


class BuildResult(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @classmethod
    def from_exit_code(cls, code: int) -> BuildResult:
        return cls.SUCCESS if code == 0 else cls.FAILURE


def run(command_line: CommandLine, output: TextIO) -> BuildResult:
    """Execute a command line and stream its output.

    Blocks until the process exits. stderr is merged into stdout and
    every line is written to output as soon as it is read.

    Args:
        command_line: Arguments, environment and working directory
        output: Build log receiving the process output

    Returns:
        SUCCESS for exit code 0, FAILURE otherwise or when the
        process could not be started, its output could not be read
        or the build log could not be written

    Raises:
        KeyboardInterrupt: After terminating the process, when the
            build is interrupted while waiting
    """
    logger.debug("Executing: {command}", command=str(command_line))

    try:
        process = subprocess.Popen(
            list(command_line.args),
            cwd=command_line.workdir,
            env=command_line.env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        return _launch_failed(e, output)

    log_failed = False
    try:
        for line in process.stdout:
            try:
                output.write(line)
            except OSError:
                log_failed = True
                raise
        returncode = process.wait()
    except KeyboardInterrupt:
        logger.warning("Build interrupted, terminating Maven")
        _terminate(process)
        raise
    except OSError as e:
        _terminate(process)
        if log_failed:
            # The build log itself is unwritable
            logger.error("Cannot write build log: {error}", error=str(e))
            return BuildResult.FAILURE
        return _launch_failed(e, output)
    finally:
        process.stdout.close()

    logger.info("Maven exited with code {code}", code=returncode)
    return BuildResult.from_exit_code(returncode)


def _launch_failed(error: OSError, output: TextIO) -> BuildResult:
    logger.error(
        "Command execution failed: {error}", error=str(error)
    )
    output.write(f"FATAL: command execution failed: {error}\n")
    return BuildResult.FAILURE


def _terminate(process: subprocess.Popen) -> None:
    if process.poll() is None:
        process.kill()
        process.wait()
