"""Console logger backed by the standard logging module.

Output goes to STDERR: in stdio mode STDOUT carries the MCP protocol stream
and any stray line there corrupts it.
"""

import logging
import sys
from typing import Any

from .base import Logger


class ConsoleLogger(Logger):
    """Logger that renders key/value context as ``key=value`` pairs."""

    def __init__(self, name: str = "qlik-mcp", level: int = logging.INFO) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            self._logger.addHandler(handler)

    @staticmethod
    def _format(message: str, kwargs: dict) -> str:
        if not kwargs:
            return message
        context = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
        return f"{message} | {context}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format(message, kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(self._format(message, kwargs))
