"""Utility helpers."""

from conceptgraph.utils.logger import ExtractionLogger, get_logger, setup_logger

__all__ = ["ExtractionLogger", "get_logger", "setup_logger"]
