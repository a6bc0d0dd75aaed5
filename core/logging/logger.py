"""
Centralized logging configuration for NotchPanel.

Uses a rotating file handler with logs stored in the logs/ directory and
colored, duplicate-suppressing console output in debug mode.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Tuple

from core.logging.tags import TAG_FALLBACK


_VERBOSE: bool = False
# Base directory for logs. Initialised to the project root and updated by
# setup_logging() for frozen builds so get_log_dir() always points at the
# effective runtime location.
_BASE_DIR: Path = Path(__file__).parent.parent.parent

LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'
LOG_FILE_NAME = "notchpanel.log"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours each line by level, or by tag for
    the tags listed in ``TAG_COLORS``."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    TAG_COLORS = {
        TAG_FALLBACK: '\033[38;5;208m',   # Orange
    }
    RESET = '\033[0m'

    def _color_for(self, record: logging.LogRecord) -> Optional[str]:
        message = str(record.msg)
        args = record.args if isinstance(record.args, tuple) else ()
        for tag, color in self.TAG_COLORS.items():
            if tag in message or tag in args:
                return color
        return self.LEVEL_COLORS.get(record.levelname)

    def format(self, record):
        text = super().format(record)
        color = self._color_for(record)
        if color is None:
            return text
        return f"{color}{text}{self.RESET}"


def _leading_tag(record: logging.LogRecord) -> Optional[str]:
    try:
        message = record.getMessage()
    except Exception:
        return None
    if message.startswith("["):
        end = message.find("]")
        if end > 0:
            return message[:end + 1]
    return None


class SuppressingStreamHandler(logging.StreamHandler):
    """Console handler that collapses bursts of similar lines.

    Consecutive DEBUG/INFO records sharing logger, level and leading tag
    print once; the rest are counted and reported as
    "[N Suppressed: CHECK LOG]" when the burst ends. WARNING and above
    always print. The log file keeps every line.
    """

    def __init__(self, stream=None):
        super().__init__(stream)
        self._burst_key: Optional[Tuple[str, int, Optional[str]]] = None
        self._burst_last: Optional[logging.LogRecord] = None
        self._suppressed = 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            quiet = record.levelno < logging.WARNING
            key = (record.name, record.levelno, _leading_tag(record))
            if quiet and key == self._burst_key:
                self._suppressed += 1
                self._burst_last = record
                return
            self._end_burst()
            self._write(record)
            if quiet:
                self._burst_key = key
                self._burst_last = record
        except Exception:
            self.handleError(record)

    def _end_burst(self) -> None:
        last = self._burst_last
        if self._suppressed and last is not None:
            self._write(logging.makeLogRecord({
                'name': last.name,
                'levelno': last.levelno,
                'levelname': last.levelname,
                'msg': f"[{self._suppressed} Suppressed: CHECK LOG]",
                'args': None,
                'created': last.created,
                'msecs': last.msecs,
                'relativeCreated': last.relativeCreated,
            }))
        self._burst_key = None
        self._burst_last = None
        self._suppressed = 0

    def _write(self, record: logging.LogRecord) -> None:
        # Narrow console encodings get replacement characters, not errors
        stream = self.stream
        if stream is None:
            return
        text = self.format(record) + self.terminator
        try:
            stream.write(text)
        except UnicodeEncodeError:
            encoding = getattr(stream, "encoding", None) or "ascii"
            stream.write(text.encode(encoding, errors="replace").decode(encoding))
        self.flush()

    def close(self) -> None:
        try:
            self._end_burst()
        finally:
            super().close()


def get_log_dir() -> Path:
    """Return the directory used for log files.

    setup_logging() should be called once at startup so that _BASE_DIR is
    updated for frozen builds and the returned path matches the location used
    by the active RotatingFileHandler.
    """

    return _BASE_DIR / "logs"


def _resolve_base_dir() -> Path:
    # Frozen builds (PyInstaller/Nuitka) keep logs next to the executable.
    import builtins

    frozen = bool(getattr(sys, "frozen", False))
    nuitka_compiled = bool(getattr(builtins, "__compiled__", False))
    if frozen or nuitka_compiled:
        exe_path = Path(getattr(sys, "executable", "") or "")
        if exe_path.exists():
            return exe_path.parent
    return _BASE_DIR


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """
    Configure application logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: When True, setting change logs include full before/after
            values. Verbose mode also implies debug-level logging.
    """
    global _VERBOSE, _BASE_DIR

    debug_enabled = debug or verbose
    _BASE_DIR = _resolve_base_dir()

    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level = logging.DEBUG if debug_enabled else logging.INFO

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    if debug_enabled:
        console_handler = SuppressingStreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    _VERBOSE = bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info(
        "NotchPanel logging initialized (debug=%s, verbose=%s)",
        debug_enabled,
        _VERBOSE,
    )
    root_logger.info("=" * 60)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for *name*."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""

    return _VERBOSE
