"""
Call-site aware logging for the compatibility layer launcher.

Every emitted line names the code that called the logger, not the logger
itself:

    WARN [datadog-serverless-compat] [launcher.py:42] - something happened

Lines for DEBUG, INFO and WARN go to stdout; ERROR goes to stderr. The
threshold comes from DD_LOG_LEVEL, resolved once on first use.

Example:
    >>> from serverless_compat.utils.log import create_logger
    >>> logger = create_logger(__name__)
    >>> logger.info("starting")
    INFO [datadog-serverless-compat] [example.py:3] - starting
"""

from __future__ import annotations

import logging
import re
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from serverless_compat.core.config.loader import clear_cache, load_config

LOGGER_NAME = "datadog-serverless-compat"
UNKNOWN_LOCATION = "unknown:0"
DEFAULT_MAX_FRAMES = 10

# Method severities, on the same scale as DD_LOG_LEVEL thresholds
DEBUG = 20
INFO = 30
WARN = 40
ERROR = 50

_LEVEL_LABELS = {DEBUG: "DEBUG", INFO: "INFO", WARN: "WARN", ERROR: "ERROR"}
_STDLIB_LEVELS = {
    DEBUG: logging.DEBUG,
    INFO: logging.INFO,
    WARN: logging.WARNING,
    ERROR: logging.ERROR,
}

# Source and compiled paths of this module, matched as suffixes
LOG_MODULE_SUFFIXES = (
    "serverless_compat/utils/log.py",
    "serverless_compat/utils/log.pyc",
)

# "(file:line:col)" groups; nested groups leave only the innermost matching
_EVAL_ORIGIN_RE = re.compile(r"\(([^()]+?):(\d+)(?::\d+)?\)")

_threshold: int | None = None
_max_frames: int = DEFAULT_MAX_FRAMES


class Logger(Protocol):
    """The four methods the launcher core logs through."""

    def debug(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, err: BaseException | str) -> None: ...


class CallerResolver(Protocol):
    """Finds the source location of whoever called the logger."""

    def current_caller_location(
        self,
        max_frames: int,
        exclude: Callable[[str], bool],
    ) -> tuple[str, int] | None: ...


# ============================================================================
# Threshold and depth settings
# ============================================================================


def get_log_threshold() -> int:
    """
    Return the process-wide threshold, resolving DD_LOG_LEVEL on first use.

    Returns:
        Numeric threshold (20, 30, 40, 50 or 100)
    """
    global _threshold
    if _threshold is None:
        _threshold = load_config().log_threshold
    return _threshold


def reset_log_threshold() -> None:
    """
    Forget the resolved threshold so the next log call re-reads DD_LOG_LEVEL.

    This is the explicit re-initialisation hook; nothing else changes the
    threshold after it has been resolved.
    """
    global _threshold
    _threshold = None
    clear_cache()


def set_max_frames(max_frames: int) -> None:
    """
    Set how many stack frames call-site resolution may inspect.

    Args:
        max_frames: Frame budget, at least 1

    Raises:
        ValueError: If max_frames is less than 1
    """
    global _max_frames
    if max_frames < 1:
        raise ValueError(f"max_frames must be >= 1, got {max_frames}")
    _max_frames = max_frames


def get_max_frames() -> int:
    """Current call-site frame budget."""
    return _max_frames


# ============================================================================
# Call-site resolution
# ============================================================================


def is_logging_module_path(path: str) -> bool:
    """Whether a frame filename belongs to this logging module."""
    return path.replace("\\", "/").endswith(LOG_MODULE_SUFFIXES)


def parse_eval_origin(descriptor: str | None) -> tuple[str, int] | None:
    """
    Recover a real file and line from a dynamic-evaluation descriptor.

    Descriptors embed one or more "(file:line:col)" groups, possibly nested;
    the innermost (last) one names the code that ran the evaluation.

    Args:
        descriptor: Synthetic frame filename, e.g.
            "<eval at render (<eval at (/srv/app/handler.py:12:5)>)>"

    Returns:
        (file, line) or None if the descriptor carries no origin

    Example:
        >>> parse_eval_origin("<eval at (/srv/app/handler.py:12:5)>")
        ('/srv/app/handler.py', 12)
        >>> parse_eval_origin("<string>") is None
        True
    """
    if not descriptor:
        return None
    matches = _EVAL_ORIGIN_RE.findall(descriptor)
    if not matches:
        return None
    filename, line = matches[-1]
    return filename, int(line)


class FrameCallerResolver:
    """
    CallerResolver that walks interpreter frames via ``sys._getframe``.

    Frames are followed one back-link at a time, so no full stack is ever
    built. Synthetic frames (filenames like "<string>") are recovered
    through parse_eval_origin or skipped.
    """

    def current_caller_location(
        self,
        max_frames: int,
        exclude: Callable[[str], bool],
    ) -> tuple[str, int] | None:
        try:
            frame = sys._getframe(1)
        except (AttributeError, ValueError):
            return None

        try:
            depth = 0
            while frame is not None and depth < max_frames:
                depth += 1
                filename = frame.f_code.co_filename
                if filename and not exclude(filename):
                    if filename.startswith("<") and filename.endswith(">"):
                        origin = parse_eval_origin(filename)
                        if origin is not None and not exclude(origin[0]):
                            return origin
                    else:
                        return filename, frame.f_lineno
                frame = frame.f_back
        except Exception:
            return None
        finally:
            del frame

        return None


def format_line(level: str, location: str, message: str) -> str:
    """Render one log line: ``LEVEL [name] [location] - message``."""
    return f"{level} [{LOGGER_NAME}] [{location}] - {message}"


def format_location(resolved: tuple[str, int] | None) -> str:
    """
    Format a resolved call site as ``basename:line``.

    Example:
        >>> format_location(("/srv/app/handler.py", 12))
        'handler.py:12'
        >>> format_location(None)
        'unknown:0'
    """
    if resolved is None:
        return UNKNOWN_LOCATION
    filename, line = resolved
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return f"{basename}:{line}"


# ============================================================================
# Error rendering
# ============================================================================


@dataclass(frozen=True)
class FormattedError:
    """
    Derived, immutable view of an exception for log output.

    The caller's exception is never modified; the header replacement
    happens on this copy.

    Attributes:
        message: The exception message (class name if the message is empty)
        stack: Rendered traceback lines, empty when there is no traceback
    """

    message: str
    stack: tuple[str, ...] = ()

    @classmethod
    def from_exception(cls, exc: BaseException) -> FormattedError:
        message = str(exc) or type(exc).__name__
        if exc.__traceback__ is None:
            return cls(message=message)
        rendered = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(message=message, stack=tuple(rendered.splitlines()))

    def render(self, header: str) -> str:
        """Replace the first traceback line with header, keep the rest."""
        if not self.stack:
            return header
        return "\n".join((header, *self.stack[1:]))


# ============================================================================
# Stdlib logging plumbing
# ============================================================================


class _StandardStreamHandler(logging.StreamHandler):
    """StreamHandler writing to sys.stdout or sys.stderr as bound at emit time."""

    def __init__(self, stream_name: str) -> None:
        self.stream_name = stream_name
        super().__init__(getattr(sys, stream_name))

    def emit(self, record: logging.LogRecord) -> None:
        # Capture tools rebind sys.stdout/sys.stderr after setup
        self.stream = getattr(sys, self.stream_name)
        super().emit(record)

    def setStream(self, stream):
        raise ValueError(
            f"{type(self).__name__} always writes to sys.{self.stream_name}"
        )


class _LineFormatter(logging.Formatter):
    """Renders records as "LEVEL [name] [location] - message"."""

    def format(self, record: logging.LogRecord) -> str:
        return format_line(
            getattr(record, "compat_level", record.levelname),
            getattr(record, "location", UNKNOWN_LOCATION),
            record.getMessage(),
        )


def _below_error(record: logging.LogRecord) -> bool:
    return record.levelno < logging.ERROR


def _package_logger() -> logging.Logger:
    """Return the package's stdlib logger, installing its handlers once."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, _StandardStreamHandler) for h in logger.handlers):
        formatter = _LineFormatter()

        out_handler = _StandardStreamHandler("stdout")
        out_handler.addFilter(_below_error)
        out_handler.setFormatter(formatter)

        err_handler = _StandardStreamHandler("stderr")
        err_handler.setLevel(logging.ERROR)
        err_handler.setFormatter(formatter)

        logger.addHandler(out_handler)
        logger.addHandler(err_handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger


# ============================================================================
# Logger
# ============================================================================


class CompatLogger:
    """
    Leveled logger that reports the real call site of every line.

    Args:
        origin_hint: Module name of the owner; selects a child of the
            package's stdlib logger
        threshold: Fixed threshold; None follows the process-wide one
        resolver: Call-site resolver (defaults to FrameCallerResolver)
    """

    def __init__(
        self,
        origin_hint: str,
        threshold: int | None = None,
        resolver: CallerResolver | None = None,
    ) -> None:
        self.origin_hint = origin_hint
        self._threshold = threshold
        self._resolver = resolver if resolver is not None else FrameCallerResolver()
        base = _package_logger()
        self._logger = base.getChild(origin_hint) if origin_hint else base

    @property
    def threshold(self) -> int:
        if self._threshold is not None:
            return self._threshold
        return get_log_threshold()

    def is_enabled(self, severity: int) -> bool:
        """Lower thresholds admit more output."""
        return self.threshold <= severity

    def debug(self, message: str) -> None:
        if self.is_enabled(DEBUG):
            self._emit(DEBUG, str(message))

    def info(self, message: str) -> None:
        if self.is_enabled(INFO):
            self._emit(INFO, str(message))

    def warn(self, message: str) -> None:
        if self.is_enabled(WARN):
            self._emit(WARN, str(message))

    def error(self, err: BaseException | str) -> None:
        if not self.is_enabled(ERROR):
            return
        if not isinstance(err, BaseException):
            self._emit(ERROR, str(err))
            return
        try:
            formatted = FormattedError.from_exception(err)
        except Exception:
            formatted = FormattedError(message=f"<unprintable {type(err).__name__}>")
        # The header prefix is added by the formatter, so the first stack
        # line is replaced by the bare message.
        self._emit(ERROR, formatted.render(formatted.message))

    def _emit(self, severity: int, text: str) -> None:
        location = format_location(self._resolve())
        self._logger.log(
            _STDLIB_LEVELS[severity],
            text,
            extra={
                "compat_level": _LEVEL_LABELS[severity],
                "location": location,
            },
        )

    def _resolve(self) -> tuple[str, int] | None:
        try:
            return self._resolver.current_caller_location(
                get_max_frames(), is_logging_module_path
            )
        except Exception:
            return None


def create_logger(
    origin_hint: str,
    *,
    threshold: int | None = None,
    resolver: CallerResolver | None = None,
) -> CompatLogger:
    """
    Create a logger for a module.

    Args:
        origin_hint: Usually the caller's ``__name__``
        threshold: Optional fixed threshold (e.g. from an injected config)
        resolver: Optional call-site resolver

    Returns:
        CompatLogger instance
    """
    return CompatLogger(origin_hint, threshold=threshold, resolver=resolver)


# Default logger, mirroring logging.getLogger(__name__) use across the package
log = create_logger("serverless_compat")


__all__ = [
    "CallerResolver",
    "CompatLogger",
    "FormattedError",
    "FrameCallerResolver",
    "Logger",
    "LOGGER_NAME",
    "UNKNOWN_LOCATION",
    "create_logger",
    "format_line",
    "format_location",
    "get_log_threshold",
    "get_max_frames",
    "is_logging_module_path",
    "log",
    "parse_eval_origin",
    "reset_log_threshold",
    "set_max_frames",
]
