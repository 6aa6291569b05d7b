"""
Structured Logger for the Meme-Coin Metrics Engine
Console/file handlers for stdlib logging, with loguru records routed into them
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from loguru import logger as loguru_logger

from config.config_manager import LoggingConfig


class StructuredLogger:
    """
    Structured logging system with multiple outputs
    """

    def __init__(self, name: str = "memecoin_engine", config: Optional[LoggingConfig] = None):
        self.name = name
        self.config = config or LoggingConfig()

    def _get_formatter(self, output_type: str) -> logging.Formatter:
        """Get appropriate formatter for output type"""
        if self.config.log_format == "json" and output_type != "console":
            return JsonFormatter()
        return ColoredFormatter() if output_type == "console" else StandardFormatter()

    def setup_logging(self, config: Optional[LoggingConfig] = None) -> None:
        """
        Setup logging configuration

        Args:
            config: Optional replacement configuration
        """
        if config is not None:
            self.config = config

        level = getattr(logging, self.config.log_level)

        # Root logger
        root = logging.getLogger()
        root.setLevel(level)

        # Remove existing handlers
        root.handlers = []

        if "console" in self.config.outputs:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(self._get_formatter("console"))
            root.addHandler(console_handler)

        if "file" in self.config.outputs:
            log_dir = Path(self.config.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_dir / f"{self.name}.log",
                maxBytes=self.config.max_file_size,
                backupCount=self.config.backup_count
            )
            file_handler.setFormatter(self._get_formatter("file"))
            root.addHandler(file_handler)

            # Separate error log
            error_handler = RotatingFileHandler(
                log_dir / f"{self.name}_errors.log",
                maxBytes=self.config.max_file_size,
                backupCount=self.config.backup_count
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(self._get_formatter("file"))
            root.addHandler(error_handler)

        # Collectors and processors log through loguru
        loguru_logger.remove()
        loguru_logger.add(PropagateHandler(), level=self.config.log_level, format="{message}")

        logging.getLogger(__name__).debug(
            f"Logging configured: level={self.config.log_level} outputs={self.config.outputs}"
        )


class PropagateHandler(logging.Handler):
    """Loguru sink that re-emits records through the stdlib logger of the same name"""

    def emit(self, record):
        logging.getLogger(record.name).handle(record)


class JsonFormatter(logging.Formatter):
    """JSON log formatter"""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[41m'   # Red Background
    }
    RESET = '\033[0m'

    def __init__(self):
        super().__init__('%(asctime)s - %(name)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')

    def format(self, record):
        # Colour a copy so file handlers still see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


class StandardFormatter(logging.Formatter):
    """Standard text formatter"""

    def __init__(self):
        super().__init__(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def setup_logging(config: Optional[LoggingConfig] = None, name: str = "memecoin_engine") -> StructuredLogger:
    """Configure process-wide logging and return the configured logger"""
    structured = StructuredLogger(name, config)
    structured.setup_logging()
    return structured
