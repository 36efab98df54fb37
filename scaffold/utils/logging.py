# ABOUTME: Structured logging configuration using loguru for session playback analysis.
# ABOUTME: Supports context fields (status, turn, player_id) and console/file output.

import sys
from pathlib import Path
from typing import Any

from loguru import logger

from scaffold.config.settings import LOG_LEVELS, get_settings


# Default log format with structured context
DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "{extra}"
)


def _resolve_level(log_level: str | None) -> str:
    """Upper-case `log_level`, falling back to the configured level"""
    level = (log_level if log_level is not None else get_settings().log_level).upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: '{level}'. "
            f"Must be one of: {', '.join(sorted(LOG_LEVELS))}"
        )
    return level


def setup_logging(
    log_level: str | None = None,
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = True,
    format_string: str | None = None,
    rotation: str = "100 MB",
    retention: str = "30 days",
    compression: str = "zip"
) -> None:
    """
    Configure loguru sinks for a session host.

    Level and directory default to the SCAFFOLD_LOG_LEVEL and SCAFFOLD_LOG_DIR
    settings, so hosts can simply call `setup_logging()`.

    Usage:
        >>> setup_logging(log_level="DEBUG", log_dir="logs")
        >>> logger.bind(status="playing", turn=3).info("Turn started")

    Args:
        log_level: Minimum level (default: settings.log_level)
        log_dir: Directory for daily log files (default: settings.log_dir)
        console_output: Log to stderr
        file_output: Log to rotating files
        format_string: Custom format string (default: DEFAULT_FORMAT)
        rotation: When to rotate log files
        retention: How long to keep old logs
        compression: Compression for rotated logs

    Raises:
        ValueError: If the level is not one of LOG_LEVELS
    """
    level = _resolve_level(log_level)
    fmt = format_string or DEFAULT_FORMAT

    logger.remove()

    if console_output:
        logger.add(
            sys.stderr,
            format=fmt,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    if file_output:
        directory = Path(log_dir if log_dir is not None else get_settings().log_dir)
        directory.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(directory / "scaffold_{time:YYYY-MM-DD}.log"),
            format=fmt,
            level=level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            backtrace=True,
            diagnose=True,
            enqueue=True,  # Thread-safe
        )

    logger.info(
        f"Logging configured: level={level}, "
        f"console={console_output}, file={file_output}"
    )


def get_logger() -> Any:
    """Shared loguru logger (modules may also import it directly)"""
    return logger


def log_turn_event(
    message: str,
    status: str,
    turn_number: int,
    player_id: str | None = None,
    level: str = "INFO",
    **extra_context: Any
) -> None:
    """
    Log a turn event with the standard context fields.

    Usage:
        >>> log_turn_event(
        ...     "Turn started",
        ...     status="playing",
        ...     turn_number=4,
        ...     player_id="2",
        ...     instruction="ADD",
        ...     turn_seconds=21
        ... )

    Args:
        message: Log message
        status: Current game status
        turn_number: 1-based turn number
        player_id: Optional active player id
        level: Log level (default: "INFO")
        **extra_context: Additional context fields
    """
    context = {
        "status": status,
        "turn": turn_number,
        **extra_context
    }

    if player_id:
        context["player_id"] = player_id

    bound_logger = logger.bind(**context)

    level = level.upper()
    if level == "DEBUG":
        bound_logger.debug(message)
    elif level == "WARNING":
        bound_logger.warning(message)
    elif level == "ERROR":
        bound_logger.error(message)
    else:
        bound_logger.info(message)


def log_status_transition(
    from_status: str,
    to_status: str,
    turn_number: int,
    game_time_remaining: int | None = None
) -> None:
    """
    Log a game status transition.

    Args:
        from_status: Previous status
        to_status: New status
        turn_number: 1-based turn number at the transition
        game_time_remaining: Optional seconds left on the game clock
    """
    context = {
        "from_status": from_status,
        "to_status": to_status,
        "turn": turn_number,
    }

    if game_time_remaining is not None:
        context["game_time_remaining"] = game_time_remaining

    logger.bind(**context).info(
        f"Status transition: {from_status} -> {to_status}"
    )
