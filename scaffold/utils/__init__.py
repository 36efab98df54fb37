# ABOUTME: Utility module exports for structured logging.
# ABOUTME: Provides logging.py (loguru config plus turn and status-transition helpers).

from scaffold.utils.logging import (
    get_logger,
    log_status_transition,
    log_turn_event,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_turn_event",
    "log_status_transition",
]
