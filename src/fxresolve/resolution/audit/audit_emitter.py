import logging
import sys
from pathlib import Path
from typing import Optional

from appdirs import user_log_dir

from fxresolve.model.resolution_event import LevelType, ResolutionEvent
from fxresolve.model.resolution_output_model import ResolutionResult

_LOG_FILE_NAME = "resolve.audit.json"

_LEVELS = {
    LevelType.DEBUG: logging.DEBUG,
    LevelType.INFO: logging.INFO,
    LevelType.WARN: logging.WARNING,
    LevelType.ERROR: logging.ERROR,
}


def to_logging_level(level: LevelType | str) -> int:
    if not isinstance(level, LevelType):
        try:
            level = LevelType(level.upper())
        except ValueError:
            return logging.INFO
    return _LEVELS[level]


def default_audit_log_path() -> Path:
    return Path(user_log_dir("fxresolve")) / _LOG_FILE_NAME


def emit_event(logger: logging.Logger, event: ResolutionEvent, indent: Optional[int] = None) -> None:
    logger.log(to_logging_level(event.level), event.to_json(indent=indent))


def emit_all(logger: logging.Logger, events: list[ResolutionEvent], indent: Optional[int] = None) -> None:
    for event in events:
        emit_event(logger, event, indent=indent)


def configure_emitter(dest: list[str], level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger("fxresolve.audit")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for d in dest:
        handler: logging.Handler
        if d == "stdout":
            handler = logging.StreamHandler(sys.stdout)
        elif d == "stderr":
            handler = logging.StreamHandler(sys.stderr)
        elif d.startswith("file:"):
            path = Path(d[len("file:"):])
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        else:
            raise ValueError(f"Unknown audit log destination: {d}")

        handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(handler)

    return logger


def emit_audit_log(
        result: ResolutionResult,
        dest: str = "file",
        path: Optional[Path] = None,
        level: int = logging.INFO) -> logging.Logger:
    """
    Write the resolution audit log to a file or stream, one JSON event per line.

    Args:
        result: The ResolutionResult holding the audit events
        dest: space separated values of 'stdout', 'stderr', 'file' or 'file:<path>'
        path: If dest='file', the path to write to (default: the user log dir)
        level: Minimum logging level to emit
    """
    dests = []
    for d in dest.split():
        if d == "file":
            dests.append(f"file:{path or default_audit_log_path()}")
        else:
            dests.append(d)
    logger = configure_emitter(dests, level)
    emit_all(logger, result.audit_log)
    return logger
