"""
Centralized logging configuration for netools.

Provides colored console logging and separate loggers for the
different transports (broadcast, multicast, unicast TCP/UDP) and the CLI.
Informational records go to stdout, warnings and errors to stderr.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


class _BelowLevel(logging.Filter):
    """Pass only records strictly below a given level."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


class NetLogger:
    """Centralized logger for netools components"""

    _initialized = False
    _log_dir: Optional[Path] = None

    CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
    FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Setup logging configuration.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for log files. If None, uses ./logs
            log_to_file: Whether to write logs to file
            force: Reconfigure even if logging was already set up
        """
        if cls._initialized and not force:
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger("netools")
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers.clear()

        console_formatter = colorlog.ColoredFormatter(
            cls.CONSOLE_FORMAT,
            datefmt=cls.DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )

        # Normal output on stdout
        stdout_handler = colorlog.StreamHandler(sys.stdout)
        stdout_handler.setLevel(level)
        stdout_handler.addFilter(_BelowLevel(logging.WARNING))
        stdout_handler.setFormatter(console_formatter)
        root_logger.addHandler(stdout_handler)

        # Failures on stderr
        stderr_handler = colorlog.StreamHandler(sys.stderr)
        stderr_handler.setLevel(max(level, logging.WARNING))
        stderr_handler.setFormatter(console_formatter)
        root_logger.addHandler(stderr_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / "netools.log")
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(cls.FILE_FORMAT, datefmt=cls.DATE_FORMAT)
            )
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'transport.tcp', 'cli')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"netools.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return NetLogger.get_logger(name)


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None):
    """Setup logging configuration, writing to a file only when log_dir is given"""
    NetLogger.setup(level=level, log_dir=log_dir, log_to_file=log_dir is not None, force=True)
