# ABOUTME: Turn-time calculator mapping workload, progress and game-clock pressure to a turn budget.
# ABOUTME: Pure, deterministic arithmetic: base + 3s per piece - 1s per completed turn - pressure, clamped.

BASE_TIME_SECONDS = 15
SECONDS_PER_PIECE = 3
SECONDS_PER_COMPLETED_TURN = 1
MIN_TIME_SECONDS = 10
MAX_TIME_SECONDS = 40

# Pressure penalties by remaining-time band
MID_GAME_PRESSURE_SECONDS = 3
LATE_GAME_PRESSURE_SECONDS = 5


def game_pressure(percent_remaining: float) -> int:
    """
    Step penalty subtracted from the turn budget as the game clock runs down.

    - more than 50% remaining: 0 seconds
    - 20% to 50% remaining (inclusive): 3 seconds
    - under 20% remaining: 5 seconds

    Args:
        percent_remaining: Percentage of total game time remaining (0-100)

    Returns:
        Pressure in seconds
    """
    if percent_remaining > 50:
        return 0
    if percent_remaining >= 20:
        return MID_GAME_PRESSURE_SECONDS
    return LATE_GAME_PRESSURE_SECONDS


def turn_time_floor(pieces: int) -> int:
    """
    Minimum budget for a turn handling `pieces` pieces.

    Heavier turns are never under-timed: the floor rises to 3 seconds per
    piece once that exceeds the flat 10 second minimum. The floor never
    exceeds the 40 second ceiling.
    """
    return min(max(MIN_TIME_SECONDS, SECONDS_PER_PIECE * pieces), MAX_TIME_SECONDS)


def calculate_turn_time(
    pieces: int,
    completed_turns: int,
    percent_remaining: float
) -> int:
    """
    Calculate the seconds allotted to a turn.

    Formula:
        raw = 15 + 3 * pieces - 1 * completed_turns - pressure(percent_remaining)
        result = clamp(raw, max(10, 3 * pieces), 40)

    Examples:
        >>> calculate_turn_time(0, 0, 100)
        15
        >>> calculate_turn_time(6, 0, 10)
        28
        >>> calculate_turn_time(1, 30, 10)
        10

    Args:
        pieces: Number of pieces to manipulate this turn
        completed_turns: Number of turns completed so far this session
        percent_remaining: Percentage of total game time remaining (0-100)

    Returns:
        Integer number of seconds for the turn

    Raises:
        ValueError: If pieces or completed_turns is negative, or
            percent_remaining is outside 0-100
    """
    if pieces < 0:
        raise ValueError(f"pieces must be non-negative, got {pieces}")

    if completed_turns < 0:
        raise ValueError(
            f"completed_turns must be non-negative, got {completed_turns}"
        )

    if not 0 <= percent_remaining <= 100:
        raise ValueError(
            f"percent_remaining must be between 0 and 100, got {percent_remaining}"
        )

    raw = (
        BASE_TIME_SECONDS
        + SECONDS_PER_PIECE * pieces
        - SECONDS_PER_COMPLETED_TURN * completed_turns
        - game_pressure(percent_remaining)
    )

    clamped = min(max(raw, turn_time_floor(pieces)), MAX_TIME_SECONDS)
    return int(round(clamped))
