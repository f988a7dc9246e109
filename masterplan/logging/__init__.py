"""
Logging configuration and utilities for the master-plan store.
"""
from .config import configure_logging, get_logger, get_navigation_logger, log_level_transition

__all__ = ["configure_logging", "get_logger", "get_navigation_logger", "log_level_transition"]
