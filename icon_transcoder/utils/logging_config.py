"""Logging configuration shared by the command-line entrypoints.

Provides:
    - Console handler and optional size-rotated file handler
    - JSON line output mode for CI log ingestion
    - Contextual fields (source file, class name) via contextvars
    - Warning capture (Python warnings → logging)

Public API:
    setup_logging(log_level="INFO", json=False, context={"app": "batch"})
    push_context(source="close.scene.yaml")
    pop_context(keys=["source"])
    log_context(source=...)   # context manager form

Format examples:
    Human: 2026-03-02T09:14:55.120Z | INFO     | source=close.scene.yaml | Transcoded Close
    JSON:  {"t":"2026-03-02T09:14:55.120+00:00","lvl":"INFO","source":"close.scene.yaml","msg":"..."}

Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextlib
import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'logging_context', default={}
)

# Handlers installed by setup_logging, removed on reconfiguration
_installed: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Formatter that appends the current contextual fields.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``
    use_color : bool
        ANSI level colors, only honoured when stderr is a terminal
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt_mode: str = "human", use_color: bool = False):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: Dict[str, Any]
    ) -> str:
        log_dict: Dict[str, Any] = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
        }
        log_dict.update(context)
        log_dict['msg'] = record.getMessage()
        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)
        return json.dumps(log_dict, default=str)

    def _format_human(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: Dict[str, Any]
    ) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        parts = [ts_str, level]
        if context:
            parts.append(' '.join(f"{k}={v}" for k, v in context.items()))
        parts.append(record.getMessage())

        line = ' | '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
    capture_warnings: bool = True,
    context: Optional[Dict[str, Any]] = None
) -> List[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Log file path; rotated by size.  None for no file logging
    json : bool
        JSON line format on every handler, default False
    color : bool
        ANSI colors on the console handler (human mode only)
    to_stderr : bool
        Log to stderr, default True
    max_bytes, backup_count : int
        File rotation settings
    capture_warnings : bool
        Route Python warnings to logging, default True
    context : dict, optional
        Initial contextual fields (e.g. {"app": "batch"})

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger

    Raises
    ------
    ValueError
        If *log_level* is not a logging level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    root.setLevel(level)
    fmt_mode = "json" if json else "human"

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter(fmt_mode, use_color=color and not json))
        _installed.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
        )
        file_handler.setFormatter(ContextFormatter(fmt_mode))
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    if context:
        push_context(**context)

    if capture_warnings:
        logging.captureWarnings(True)

    return list(_installed)


def push_context(**kwargs: Any) -> None:
    """Add contextual fields to all subsequent log records.

    Context is thread-local and task-local (contextvars).  Fields appear
    in every message until popped.
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    return dict(_context_var.get())


@contextlib.contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Push fields for the duration of a ``with`` block.

    Examples
    --------
    >>> with log_context(source="close.scene.yaml"):
    ...     logger.info("Converting")
    """
    push_context(**kwargs)
    try:
        yield
    finally:
        pop_context(keys=list(kwargs))
