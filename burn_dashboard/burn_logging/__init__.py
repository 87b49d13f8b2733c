"""
Structured logging for Burn Dashboard.

get_logger(__name__) in every module; bind_run() once per job run.
"""

from burn_dashboard.burn_logging.logger import bind_run, get_logger

__all__ = ["bind_run", "get_logger"]
