# ABOUTME: Fairness-constrained turn rotation: picks which player acts next from the roster and turn history.
# ABOUTME: Nobody plays three turns in a row and turn counts never spread more than two apart.

import random
from collections import Counter
from collections.abc import Sequence

from loguru import logger

from scaffold.models.player import Player
from scaffold.rules.exceptions import NoPlayersAvailable

# Maximum allowed gap between any player's turn count and the roster minimum
FAIRNESS_CEILING = 2
# A player may not take more than this many consecutive turns
MAX_CONSECUTIVE_TURNS = 2


def count_turns(players: Sequence[Player], history: Sequence[str]) -> dict[str, int]:
    """
    Count completed turns per player.

    History entries for ids no longer on the roster are ignored.

    Args:
        players: Current roster
        history: Player ids of completed turns, oldest first

    Returns:
        Dict mapping player id -> number of completed turns
    """
    tally = Counter(history)
    return {p.id: tally.get(p.id, 0) for p in players}


def _played_last_turns(player_id: str, history: Sequence[str]) -> bool:
    """Whether `player_id` took each of the most recent MAX_CONSECUTIVE_TURNS turns"""
    if len(history) < MAX_CONSECUTIVE_TURNS:
        return False
    return all(pid == player_id for pid in history[-MAX_CONSECUTIVE_TURNS:])


def eligible_players(players: Sequence[Player], history: Sequence[str]) -> list[Player]:
    """
    Players allowed to take the next turn, before the empty-set fallback.

    A player is excluded if they took the previous two turns, or if one
    more turn would put them more than FAIRNESS_CEILING turns ahead of the
    player with the fewest turns.
    """
    counts = count_turns(players, history)
    min_turns = min(counts.values())

    candidates = []
    for player in players:
        if _played_last_turns(player.id, history):
            continue
        if counts[player.id] + 1 - min_turns > FAIRNESS_CEILING:
            continue
        candidates.append(player)
    return candidates


def select_next_player(
    players: Sequence[Player],
    history: Sequence[str],
    rng: random.Random | None = None
) -> Player:
    """
    Select the player who acts next.

    Candidates are filtered by eligible_players(); if nobody is eligible the
    whole roster is used so the game never stalls. The pick among candidates
    is uniform.

    Args:
        players: Current roster, in seating order (must not be empty)
        history: Player ids of completed turns, oldest first
        rng: Random source (default: a fresh unseeded random.Random)

    Returns:
        The selected Player

    Raises:
        NoPlayersAvailable: If players is empty
    """
    if not players:
        raise NoPlayersAvailable("Cannot select next player from an empty roster")

    rng = rng or random.Random()

    candidates = eligible_players(players, history)
    if not candidates:
        logger.debug("No eligible players, falling back to full roster")
        candidates = list(players)

    selected = rng.choice(candidates)
    logger.debug(
        f"Selected next player {selected.id} from "
        f"{len(candidates)} candidate(s) after {len(history)} turn(s)"
    )
    return selected
