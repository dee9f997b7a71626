"""
Logger module for qlik-mcp

This module provides a flexible logging interface that allows users to
drop in their own logger implementations.

Usage:
    from qlik_mcp.logger import Logger, ConsoleLogger

    # Use the console logger
    logger = ConsoleLogger()
    logger.info("Application started", app_id="abc")

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            # Your custom implementation
            pass
"""

import logging

from .base import Logger
from .console_logger import ConsoleLogger

# Shared logger instance for modules that just need basic console logging
session_logger: Logger = ConsoleLogger(level=logging.INFO)

__all__ = [
    "Logger",
    "ConsoleLogger",
    "session_logger",
]
