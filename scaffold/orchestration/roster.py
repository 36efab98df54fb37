# ABOUTME: Roster setup operations: default roster, add, remove, rename and validation of player lists.
# ABOUTME: Pure functions over tuples of Player; the controller applies the results while in setup.

from collections.abc import Sequence
from uuid import uuid4

from scaffold.models.player import Player
from scaffold.orchestration.exceptions import InvalidRoster

DEFAULT_MIN_PLAYERS = 2
DEFAULT_MAX_PLAYERS = 6


def default_player_name(position: int) -> str:
    """Fallback name for the player at 0-based `position`"""
    return f"Player {position + 1}"


def default_roster() -> tuple[Player, ...]:
    """Two placeholder players, as shown on first launch"""
    return (
        Player(id="1", name=default_player_name(0)),
        Player(id="2", name=default_player_name(1)),
    )


def validate_roster(
    players: Sequence[Player],
    min_players: int = DEFAULT_MIN_PLAYERS,
    max_players: int = DEFAULT_MAX_PLAYERS
) -> tuple[Player, ...]:
    """
    Check roster size and id uniqueness.

    Args:
        players: Proposed roster
        min_players: Smallest allowed roster
        max_players: Largest allowed roster

    Returns:
        The roster as a tuple

    Raises:
        InvalidRoster: If the roster is outside the size limits or ids repeat
    """
    if not min_players <= len(players) <= max_players:
        raise InvalidRoster(
            f"Roster must have {min_players}-{max_players} players, got {len(players)}"
        )

    ids = [p.id for p in players]
    duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
    if duplicates:
        raise InvalidRoster(f"Duplicate player ids: {', '.join(duplicates)}")

    return tuple(players)


def add_player(
    players: Sequence[Player],
    name: str | None = None,
    max_players: int = DEFAULT_MAX_PLAYERS
) -> tuple[Player, ...]:
    """
    Append a new player with a fresh id.

    Args:
        players: Current roster
        name: Display name (default: "Player N" by position)
        max_players: Largest allowed roster

    Returns:
        New roster

    Raises:
        InvalidRoster: If the roster is already full
    """
    if len(players) >= max_players:
        raise InvalidRoster(f"Roster is full ({max_players} players)")

    if name is None or not name.strip():
        name = default_player_name(len(players))

    return (*players, Player(id=uuid4().hex, name=name.strip()))


def remove_player(
    players: Sequence[Player],
    player_id: str,
    min_players: int = DEFAULT_MIN_PLAYERS
) -> tuple[Player, ...]:
    """
    Remove a player by id.

    Raises:
        InvalidRoster: If the id is unknown or removal would go below min_players
    """
    if player_id not in {p.id for p in players}:
        raise InvalidRoster(f"Unknown player id: {player_id}")

    if len(players) <= min_players:
        raise InvalidRoster(f"Roster needs at least {min_players} players")

    return tuple(p for p in players if p.id != player_id)


def rename_player(
    players: Sequence[Player],
    player_id: str,
    name: str
) -> tuple[Player, ...]:
    """
    Rename a player. A blank name resets to "Player N" for their position.

    Raises:
        InvalidRoster: If the id is unknown
    """
    renamed = []
    found = False
    for position, player in enumerate(players):
        if player.id == player_id:
            found = True
            new_name = name.strip() or default_player_name(position)
            player = player.model_copy(update={"name": new_name})
        renamed.append(player)

    if not found:
        raise InvalidRoster(f"Unknown player id: {player_id}")

    return tuple(renamed)
