"""Logging configuration for git-kit."""

import logging
from pathlib import Path
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console

# Console for user facing output
console = Console()

# Diagnostics go to stderr so commit output stays clean
err_console = Console(stderr=True)


class Logger:
    """Centralized logging for git-kit."""

    _logger: Optional[logging.Logger] = None
    _debug_mode: bool = False

    @classmethod
    def setup_logger(
        cls,
        level: int = logging.WARNING,
        debug: bool = False,
        log_file: Optional[Path] = None
    ) -> logging.Logger:
        """Setup the logger with appropriate handlers."""
        cls._debug_mode = debug
        if debug:
            level = logging.DEBUG

        logger = logging.getLogger("gitkit")
        logger.setLevel(logging.DEBUG)
        logger.handlers.clear()
        logger.propagate = False

        console_handler = RichHandler(
            console=err_console,
            show_time=debug,
            show_path=debug,
            rich_tracebacks=True,
            tracebacks_show_locals=debug
        )
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        cls._logger = logger
        return logger

    @classmethod
    def _get(cls) -> logging.Logger:
        if cls._logger is None:
            cls.setup_logger()
        return cls._logger

    @classmethod
    def debug(cls, message: str, *args, **kwargs):
        """Log debug message."""
        cls._get().debug(message, *args, **kwargs)

    @classmethod
    def info(cls, message: str, *args, **kwargs):
        """Log info message."""
        cls._get().info(message, *args, **kwargs)

    @classmethod
    def warning(cls, message: str, *args, **kwargs):
        """Log warning message."""
        cls._get().warning(message, *args, **kwargs)

    @classmethod
    def error(cls, message: str, *args, **kwargs):
        """Log error message."""
        cls._get().error(message, *args, **kwargs)

    @classmethod
    def success(cls, message: str):
        """Print success message (using rich)."""
        console.print(f"🟢 {message}", style="green", markup=False)

    @classmethod
    def print(cls, message: str, style: str = None, markup: bool = True):
        """Print using rich."""
        if style:
            console.print(message, style=style, markup=markup)
        else:
            console.print(message, markup=markup)
