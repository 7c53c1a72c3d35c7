"""
Logging configuration for cdda_tileset_diff.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from ..settings import AppSettings


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name for terminal output."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = super().format(record)

        # Color only the level name
        if record.levelname in formatted:
            formatted = formatted.replace(
                record.levelname, f"{color}{record.levelname}{reset}", 1
            )

        return formatted


class CSVFormatter(logging.Formatter):
    """CSV-safe formatter for file logging."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        level = record.levelname.ljust(8)
        duration = f"{int(record.relativeCreated)} ms"
        module = record.name
        line_no = str(record.lineno)
        message = record.getMessage()

        # Standard CSV quote escaping
        message = message.replace('"', '""')

        return f'"{timestamp}";{level};"{duration}";"{module}";"{line_no}";"{message}"'


def setup_logging(settings: AppSettings, level_override: Optional[str] = None) -> None:
    """
    Setup logging with a stderr console handler and an optional CSV file handler.

    Args:
        settings: AppSettings instance for all logging configuration
        level_override: Console level taking precedence over the settings
    """
    console_level = (level_override or settings.console_log_level).upper()
    use_colors = settings.console_use_colors
    file_enabled = settings.file_logging
    log_file = settings.log_file_path

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    project_logger = logging.getLogger("cdda_tileset_diff")
    project_logger.setLevel(logging.DEBUG)

    root_logger.handlers.clear()

    if use_colors:
        console_formatter: logging.Formatter = ColoredFormatter(
            fmt="%(asctime)s : %(levelname)-8s : %(message)s", datefmt="%H:%M:%S"
        )
    else:
        console_formatter = logging.Formatter(
            fmt="%(asctime)s : %(levelname)-8s : %(message)s", datefmt="%H:%M:%S"
        )

    # StreamHandler writes to stderr, keeping stdout for progress output
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, console_level, logging.INFO))
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    log_path = None
    if file_enabled:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            root_logger.addHandler(file_handler)
        except OSError as e:
            # Continue with console logging only
            root_logger.warning(f"Could not setup file logging: {e}")
            log_path = None

    # Suppress DEBUG logs from noisy libraries
    logging.getLogger("PIL").setLevel(logging.INFO)
    logging.getLogger("PIL.PngImagePlugin").setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.debug(f"Console logging: {console_level} (colors: {use_colors})")
    if log_path:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
