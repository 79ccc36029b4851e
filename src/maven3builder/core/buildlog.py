"""Per-build console log."""

import sys
from pathlib import Path
from typing import TextIO


class BuildLog:
    """Text sink for the output of a single build.

    Every write goes to ``<build_root>/log`` and, unless disabled, is
    echoed to the console as it arrives. Used as a context manager so
    the log file is closed when the step finishes.
    """

    def __init__(
        self, build_root: Path, echo: TextIO | None = sys.stdout
    ):
        """Open the log file for this build.

        Args:
            build_root: Directory holding the build's records
            echo: Stream that receives a copy of every write, or None
        """
        build_root.mkdir(parents=True, exist_ok=True)
        self.log_file = build_root / "log"
        self._file = open(self.log_file, "a", encoding="utf-8")  # noqa: SIM115
        self._echo = echo

    def write(self, text: str) -> int:
        self._file.write(text)
        self._file.flush()
        if self._echo is not None:
            self._echo.write(text)
            self._echo.flush()
        return len(text)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False
