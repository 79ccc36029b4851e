"""Host logging for maven3builder.

Records go through logfire. The console sink is logfire's own
console renderer. The file sink keeps one plain-text log per build
under the log root, so what the step decided (installation chosen,
command line, exit code) survives next to the build's own output.
"""

from __future__ import annotations

import contextlib
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from pydantic import Field, PrivateAttr, model_validator

from maven3builder.core.base import BaseConfig

# Levels the step logs at, mapped to OpenTelemetry severity numbers
LEVELS = {
    "debug": logs_pb2.SEVERITY_NUMBER_DEBUG,
    "info": logs_pb2.SEVERITY_NUMBER_INFO,
    "warning": logs_pb2.SEVERITY_NUMBER_WARN,
    "error": logs_pb2.SEVERITY_NUMBER_ERROR,
}

_current_logger: Logger | None = None


class _LoggerProxy:
    """Module-level handle on the configured Logger.

    Until setup_logger() runs, logging calls do nothing and span()
    yields an empty context.
    """

    def __getattr__(self, name):
        if _current_logger is not None:
            return getattr(_current_logger, name)
        if name == "span":
            return lambda *args, **kwargs: contextlib.nullcontext()  # noqa: ARG005
        return lambda *args, **kwargs: None  # noqa: ARG005

    def __enter__(self):
        if _current_logger is None:
            return self
        return _current_logger.__enter__()

    def __exit__(self, *args):
        if _current_logger is None:
            return False
        return _current_logger.__exit__(*args)


logger = _LoggerProxy()


def level_of(span: ReadableSpan) -> str:
    """Name of the highest level the span's severity reaches."""
    number = (span.attributes or {}).get(
        "logfire.level_num", LEVELS["info"]
    )
    for name in ("error", "warning", "info"):
        if number >= LEVELS[name]:
            return name
    return "debug"


class SeverityFilter(SpanExporter):
    """Forwards spans at or above a level to another exporter."""

    def __init__(self, exporter: SpanExporter, level: str):
        self._exporter = exporter
        self._threshold = LEVELS.get(level.lower(), LEVELS["info"])

    def export(self, spans):
        kept = [
            span for span in spans
            if (span.attributes or {}).get("logfire.level_num", LEVELS["info"])
            >= self._threshold
        ]
        if not kept:
            return SpanExportResult.SUCCESS
        return self._exporter.export(kept)

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


class ConsoleSink(BaseConfig):
    """Log records rendered on the terminal by logfire."""

    enabled: bool = True
    level: str | None = Field(
        default=None,
        description="debug, info, warning or error; defaults to Logger.level",
    )
    colors: str = Field(default="auto", description="auto, always or never")

    def options(self):
        """logfire console options, or False when disabled."""
        from logfire import ConsoleOptions

        if not self.enabled:
            return False
        return ConsoleOptions(
            min_log_level=self.level,
            colors=self.colors,
            include_timestamps=False,
            verbose=False,
        )


class FileSink(BaseConfig):
    """Plain-text log file for one build.

    Each line is the timestamp, the level, the message, then the
    keyword arguments of the logging call as key=value pairs.
    """

    enabled: bool = False
    level: str | None = Field(
        default=None,
        description="debug, info, warning or error; defaults to Logger.level",
    )
    path: str | None = Field(
        default=None,
        description="Log file; defaults to <log_root>/<build>/maven3builder.log",
    )

    _file: Any = PrivateAttr(default=None)
    _processor: Any = PrivateAttr(default=None)

    def log_path(self, log_root: Path, build_name: str) -> Path:
        if self.path:
            return Path(self.path)
        return Path(log_root) / build_name / "maven3builder.log"

    @staticmethod
    def render(span: ReadableSpan) -> str:
        attrs = span.attributes or {}
        when = datetime.fromtimestamp(span.start_time / 1e9, tz=UTC)
        line = "{} {:<7} {}".format(
            when.strftime("%Y-%m-%d %H:%M:%S"),
            level_of(span).upper(),
            attrs.get("logfire.msg", span.name),
        )
        extra = sorted(
            (key, value) for key, value in attrs.items()
            if not key.startswith(("logfire.", "code."))
        )
        if extra:
            line += " " + " ".join(f"{k}={v!r}" for k, v in extra)
        return line + "\n"

    def open(self, log_root: Path, build_name: str, level: str):
        """Open the log file and return a span processor writing to it."""
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
        )

        target = self.log_path(log_root, build_name)
        target.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(target, "a", buffering=1, encoding="utf-8")  # noqa: SIM115
        exporter = ConsoleSpanExporter(out=self._file, formatter=self.render)
        self._processor = BatchSpanProcessor(
            SeverityFilter(exporter, self.level or level)
        )
        return self._processor

    def close(self):
        """Flush pending records, then close the file."""
        if self._processor is not None:
            with contextlib.suppress(Exception):
                self._processor.shutdown()
            self._processor = None
        if self._file is not None and not self._file.closed:
            self._file.close()


class Logger(BaseConfig):
    """Logging configuration plus the calls the step makes.

    Closing it closes the file sink.
    """

    level: str = Field(
        default="info",
        description="debug, info, warning or error",
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    file: FileSink = Field(default_factory=FileSink)

    @model_validator(mode="after")
    def _default_sink_levels(self) -> Logger:
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, build_name: str):
        """Point logfire at the enabled sinks.

        build_name names the service and the default log directory.
        Nothing is ever sent to the logfire service.
        """
        import logfire

        processors = []
        if self.file.enabled:
            processors.append(self.file.open(log_root, build_name, self.level))

        logfire.configure(
            service_name=f"maven3builder-{build_name}",
            send_to_logfire=False,
            console=self.console.options(),
            additional_span_processors=processors or None,
        )

    def debug(self, msg: str, **kwargs):
        import logfire
        logfire.debug(msg, **kwargs)

    def info(self, msg: str, **kwargs):
        import logfire
        logfire.info(msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        import logfire
        logfire.warn(msg, **kwargs)

    def error(self, msg: str, **kwargs):
        import logfire
        logfire.error(msg, **kwargs)

    def span(self, msg: str, **kwargs):
        """Context manager grouping the records logged inside it."""
        import logfire
        return logfire.span(msg, **kwargs)


def setup_logger(
    log_root: Path,
    build_name: str,
    console: ConsoleSink | None = None,
    file: FileSink | None = None,
    level: str = "info",
) -> Logger:
    """Install the Logger behind the module-level ``logger``."""
    global _current_logger

    _current_logger = Logger(
        level=level,
        console=console or ConsoleSink(),
        file=file or FileSink(),
    )
    _current_logger.setup(log_root, build_name)
    return _current_logger
