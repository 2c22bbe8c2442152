"""Shared logging configuration with colored console output and file support."""

import logging
from logging import Logger
from typing import Optional, Union

from termcolor import colored

from iconset.utility.path_finder import Finder

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class ColorFormatter(logging.Formatter):
    """
    Formatter that colors the level name with termcolor.
    Only attached to the console handler; the file handler stays plain.
    """

    def format(self, record: logging.LogRecord) -> str:
        padded_level = f"{record.levelname + ':':<9}"
        color = LEVEL_COLORS.get(record.levelname)
        record.colored_levelname = (
            colored(padded_level, color) if color else padded_level
        )
        return super().format(record)


class AppLogger:
    """
    Central logging helper.

    Usage:
        # In the app bootstrap (once)
        AppLogger.init(level="INFO")

        # In any module
        logger = AppLogger.get_logger(__name__)
        logger.info("Generating icon set")
    """

    _configured: bool = False

    @classmethod
    def init(
        cls,
        level: Union[int, str] = logging.INFO,
        log_to_file: bool = False,
        filename: str = "iconset_server.log",
    ) -> None:
        """
        Configure the root logger with a colored console handler and an
        optional WARNING-level file handler. Only the first call has an effect.
        """
        if cls._configured:
            return
        cls._configured = True

        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Drop handlers installed by uvicorn or basicConfig
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(
            ColorFormatter("%(colored_levelname)s %(name)s | %(message)s")
        )
        root_logger.addHandler(console_handler)

        if log_to_file:
            logs_dir = Finder().get_directory("logs")
            file_handler = logging.FileHandler(logs_dir / filename, encoding="utf-8")
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-8s | %(name)s | "
                    "%(filename)s:%(lineno)d | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(file_handler)

    @staticmethod
    def get_logger(name: Optional[str] = None) -> Logger:
        """
        Get a named logger. Call this in any module instead of logging.getLogger().
        """
        return logging.getLogger(name if name is not None else __name__)
