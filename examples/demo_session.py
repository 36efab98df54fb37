#!/usr/bin/env python3
# ABOUTME: Demo script driving a seeded game session headlessly through turns, timeouts and game over.
# ABOUTME: Prints each instruction, turn budget and cue so the rules can be inspected without a UI.

"""
Demo of the Scaffold session controller

Runs a short seeded game: players take turns, some finish in time and some
let the clock run out, until the game clock expires and a winner is chosen.

Usage:
    uv run python examples/demo_session.py
    SCAFFOLD_LOG_LEVEL=DEBUG uv run python examples/demo_session.py
"""

import random

from scaffold.config.settings import Settings, get_settings
from scaffold.models.cues import CueEvent
from scaffold.models.player import Player
from scaffold.models.session import GameMode, GameStatus
from scaffold.orchestration.cue_router import CueRouter
from scaffold.orchestration.session_controller import GameSessionController
from scaffold.utils.logging import setup_logging


def print_cue(event: CueEvent) -> None:
    """Stand-in for the audio layer"""
    suffix = f" ({event.text})" if event.text else ""
    print(f"    [cue] {event.cue.value}{suffix}")


def run_demo(settings: Settings, mode: GameMode, seed: int = 42) -> None:
    """Play one five-minute game in `mode`"""
    print("\n" + "=" * 70)
    print(f"DEMO: {mode.value} game (seed={seed})")
    print("=" * 70)

    router = CueRouter()
    router.subscribe(print_cue)

    controller = GameSessionController(
        settings=settings.model_copy(update={"game_mode": mode}),
        rng=random.Random(seed),
        cue_router=router,
    )
    players = [
        Player(id="ana", name="Ana"),
        Player(id="ben", name="Ben"),
        Player(id="cai", name="Cai"),
    ]
    controller.initialize_session(players, duration_minutes=5)

    # Players finish a turn after a random share of their budget; a few run out
    play_rng = random.Random(seed + 1)

    while controller.state.game_status == GameStatus.PLAYING:
        state = controller.state
        print(f"\nTurn {state.turn_number}: {state.active_player.name}")
        instruction = controller.start_turn()
        print(f"  {instruction.text}")
        if instruction.secondary_text:
            print(f"  {instruction.secondary_text}")
        print(f"  Budget: {controller.state.turn_time_remaining}s")

        seconds_used = play_rng.randint(3, controller.state.turn_time_remaining + 3)
        for _ in range(seconds_used):
            controller.tick()
            if not controller.state.is_turn_active:
                break

        state = controller.state
        if state.game_status != GameStatus.PLAYING:
            break
        if state.is_turn_timed_out:
            controller.acknowledge_timeout()
        else:
            controller.end_turn(is_manual=True)

    state = controller.state
    print(f"\nGame over after {state.completed_turns} turns")
    controller.declare_winner(players[0].id)
    print(f"Winner: {controller.state.winning_player.name}")


def main():
    """Run both game modes"""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, file_output=False)
    run_demo(settings, GameMode.STANDARD)
    run_demo(settings, GameMode.EXPERIMENTAL)


if __name__ == "__main__":
    main()
