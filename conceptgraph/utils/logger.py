"""
Logging configuration for conceptgraph.
Optionally saves logs to the project logs/ folder with rotation.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


# Module-level logger cache
_loggers: dict = {}


def get_project_root() -> Path:
    """Get project root directory."""
    # This file is in conceptgraph/utils/, so parents[2] is the project root
    return Path(__file__).resolve().parents[2]


def get_logs_dir() -> Path:
    """
    Get or create logs directory.

    Uses CONCEPTGRAPH_LOG_DIR when set, otherwise project_root/logs,
    falling back to /tmp/logs when that is not writable.

    Returns:
        Path: Logs directory path
    """
    env_dir = os.getenv("CONCEPTGRAPH_LOG_DIR")
    logs_dir = Path(env_dir) if env_dir else get_project_root() / "logs"

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        logs_dir = Path("/tmp/logs")
        logs_dir.mkdir(parents=True, exist_ok=True)

    return logs_dir


def setup_logger(
    name: str,
    level: Optional[int] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
) -> logging.Logger:
    """
    Set up a logger with console and file handlers.

    Args:
        name: Logger name (typically module name)
        level: Logging level (defaults to INFO or CONCEPTGRAPH_LOG_LEVEL env var)
        log_to_console: Whether to output to console
        log_to_file: Whether to output to logs/conceptgraph.log

    Returns:
        Configured logger
    """
    if level is None:
        env_level = os.getenv("CONCEPTGRAPH_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, env_level, logging.INFO)

    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        _loggers[name] = logger
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_to_file:
        file_handler = RotatingFileHandler(
            get_logs_dir() / "conceptgraph.log",
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _loggers[name] = logger
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get an existing logger or create a basic one.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name in _loggers:
        return _loggers[name]
    return setup_logger(name)


class ExtractionLogger:
    """
    Structured logger for a single extraction request.
    Provides convenience methods for common log patterns.
    """

    def __init__(self, request_id: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.request_id = request_id or datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.logger = logger or get_logger("conceptgraph.requests")

    def request_start(self, text_length: int, persona: str, max_nodes: int) -> None:
        """Log request start."""
        self.logger.info(
            f"[{self.request_id}] Extract graph: {text_length} chars, persona={persona}, max_nodes={max_nodes}"
        )

    def service_status(self, available: bool) -> None:
        """Log availability probe result."""
        status = "available" if available else "UNAVAILABLE"
        self.logger.info(f"[{self.request_id}] [Service] {status}")

    def compression_result(self, original: int, compressed: int, depth: int, degraded: bool) -> None:
        """Log compression outcome."""
        flag = " (degraded)" if degraded else ""
        self.logger.info(
            f"[{self.request_id}] [Compress] {original} -> {compressed} chars at depth {depth}{flag}"
        )

    def validation_summary(self, diagnostics: dict, node_count: int) -> None:
        """Log validation repairs."""
        repairs = {k: v for k, v in diagnostics.items() if v and k != "input_count"}
        self.logger.info(f"[{self.request_id}] [Validate] {node_count} nodes, repairs: {repairs or 'none'}")

    def fallback_used(self, reason: str) -> None:
        """Log switch to the fallback builder."""
        self.logger.warning(f"[{self.request_id}] [Fallback] {reason}")

    def request_end(self, method: str, node_count: int, degraded: bool) -> None:
        """Log request result."""
        self.logger.info(
            f"[{self.request_id}] Done: method={method}, nodes={node_count}, degraded={degraded}"
        )

    def debug(self, message: str) -> None:
        """Log debug message."""
        self.logger.debug(f"[{self.request_id}] {message}")
