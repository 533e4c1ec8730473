"""
Explorer Utils - logging setup and helpers.
"""

from mc_explorer.utils.logging import format_context, get_logger, log_error, log_operation, setup_logging

__all__ = [
    "format_context",
    "get_logger",
    "log_error",
    "log_operation",
    "setup_logging",
]
