"""
Logging infrastructure for LSP Auto Setup.

Every user-visible report is emitted through a ``SourceTagAdapter`` so it
carries the fixed ``LSP Auto Setup`` tag and can be told apart from
unrelated host messages.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

SOURCE_TAG = "LSP Auto Setup"

_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields such as ``source`` and ``server``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class SourceTagAdapter(logging.LoggerAdapter):
    """Logger adapter that tags every message with the source tag."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        extra.setdefault("source", SOURCE_TAG)
        kwargs["extra"] = extra
        return f"[{SOURCE_TAG}] {msg}", kwargs


class LspAutoSetupLogger:
    """Logging manager for LSP Auto Setup."""

    def __init__(self):
        self._loggers: Dict[str, SourceTagAdapter] = {}
        self._setup_done = False

    def setup_logging(
        self,
        enabled: bool = True,
        level: Union[str, int] = logging.INFO,
        console_level: Union[str, int] = logging.WARNING,
        log_file: Optional[Path] = None,
        format_type: str = "text",
        enable_rich: bool = True,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        force: bool = False,
    ) -> None:
        """
        Setup logging configuration.

        Args:
            enabled: Enable logging completely
            level: File logging level
            console_level: Console logging level
            log_file: Path to log file (optional)
            format_type: Format type ('text', 'json')
            enable_rich: Enable Rich console output
            max_bytes: Maximum log file size before rotation
            backup_count: Number of backup files to keep
            force: Reconfigure even if logging was already set up
        """
        if self._setup_done and not force:
            return

        root_logger = logging.getLogger()

        if not enabled:
            root_logger.setLevel(logging.CRITICAL)
            root_logger.handlers.clear()
            self._setup_done = True
            return

        if isinstance(level, str):
            level = getattr(logging, level.upper())
        if isinstance(console_level, str):
            console_level = getattr(logging, console_level.upper())

        # Root logger uses the most permissive level
        root_logger.setLevel(min(level, console_level))
        root_logger.handlers.clear()

        if enable_rich:
            console_handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                markup=False,
                show_path=False,
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            if format_type == "json":
                console_handler.setFormatter(JSONFormatter())
            else:
                console_handler.setFormatter(
                    logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
                )

        console_handler.setLevel(console_level)
        root_logger.addHandler(console_handler)

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )

            if format_type == "json":
                file_handler.setFormatter(JSONFormatter())
            else:
                file_handler.setFormatter(
                    logging.Formatter(
                        "%(asctime)s | %(levelname)s | %(name)s | "
                        "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
                    )
                )

            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)

        self._setup_done = True

    def get_logger(self, name: str) -> SourceTagAdapter:
        """
        Get or create a tagged logger.

        Args:
            name: Logger name

        Returns:
            Logger adapter carrying the source tag
        """
        if name not in self._loggers:
            self._loggers[name] = SourceTagAdapter(logging.getLogger(name), {})

        return self._loggers[name]


# Global logger instance
_logger_manager = LspAutoSetupLogger()

# Convenience functions
setup_logging = _logger_manager.setup_logging
get_logger = _logger_manager.get_logger
