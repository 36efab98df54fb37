# ABOUTME: GameSessionController owning one session's state: setup, turn sequencing, clocks and cues.
# ABOUTME: Every operation builds the next immutable SessionState from a snapshot, swaps it in, then publishes cues.

import random
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from scaffold.config.settings import Settings, get_settings
from scaffold.models.cues import SOUND_CUES, VOICE_CUES, CueEvent, CueType
from scaffold.models.instruction import Instruction
from scaffold.models.player import Player
from scaffold.models.session import VALID_DURATIONS, GameStatus, SessionState
from scaffold.orchestration.cue_router import CueRouter
from scaffold.orchestration.exceptions import (
    InvalidDuration,
    InvalidRoster,
    InvalidStateTransition,
    NoActivePlayer,
    NoTurnInProgress,
    TimeoutNotPending,
    TurnAlreadyActive,
    TurnTimedOut,
)
from scaffold.orchestration.roster import default_roster, validate_roster
from scaffold.rules.instructions import get_instruction_policy
from scaffold.rules.rotation import select_next_player
from scaffold.rules.turn_time import calculate_turn_time
from scaffold.utils.logging import log_status_transition, log_turn_event

# Turn seconds remaining at which the countdown cue fires
COUNTDOWN_SECONDS = 10


class GameSessionController:
    """
    Coordinator for a single game session.

    Status flow: setup -> playing -> finished -> winner, with playing -> setup
    on quit and finished/winner -> setup on new game or rematch.

    The controller exclusively owns the session state. Callers read
    `controller.state` (an immutable snapshot) and invoke operations; they
    never change counters directly. Cues are published only after the new
    state has been swapped in, so a cue handler that calls back into the
    controller always sees committed state.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        cue_router: CueRouter | None = None
    ):
        """
        Initialize session controller.

        Args:
            settings: Game settings (default: get_settings())
            rng: Random source shared by player selection and instruction generation
            cue_router: Router receiving cue events (default: a new CueRouter)
        """
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.router = cue_router or CueRouter()

        duration = self.settings.default_duration_minutes
        self._state = SessionState(
            players=default_roster(),
            duration_minutes=duration,
            game_time_remaining=duration * 60,
        )

    @property
    def state(self) -> SessionState:
        """Current immutable session snapshot"""
        return self._state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _commit(self, **changes: Any) -> SessionState:
        """
        Validate the next snapshot and replace the current one in a single assignment.

        Raises:
            pydantic.ValidationError: If the changes break a SessionState constraint
        """
        self._state = SessionState.model_validate({**dict(self._state), **changes})
        return self._state

    def _cue(
        self,
        cue: CueType,
        snapshot: SessionState,
        text: str | None = None
    ) -> CueEvent | None:
        """Build a cue from a snapshot, or None if its switch is off"""
        if cue in SOUND_CUES and not self.settings.sound_enabled:
            return None
        if cue in VOICE_CUES and not self.settings.voice_enabled:
            return None

        return CueEvent(
            cue=cue,
            timestamp=datetime.now(UTC),
            turn_number=snapshot.turn_number,
            player_id=snapshot.active_player.id if snapshot.active_player else None,
            text=text,
        )

    def _publish(self, events: Sequence[CueEvent | None]) -> None:
        for event in events:
            if event is not None:
                self.router.route_cue(event)

    def _require_status(self, *allowed: GameStatus, operation: str) -> SessionState:
        snapshot = self._state
        if snapshot.game_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot {operation} while game is {snapshot.game_status.value}"
            )
        return snapshot

    def _require_not_playing(self, operation: str) -> SessionState:
        snapshot = self._state
        if snapshot.game_status == GameStatus.PLAYING:
            raise InvalidStateTransition(f"Cannot {operation} while game is playing")
        return snapshot

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def set_players(self, players: Sequence[Player]) -> SessionState:
        """
        Replace the roster during setup.

        Raises:
            InvalidStateTransition: If not in setup
            InvalidRoster: If the roster violates size or id rules
        """
        self._require_status(GameStatus.SETUP, operation="edit roster")
        roster = validate_roster(
            players, self.settings.min_players, self.settings.max_players
        )
        return self._commit(players=roster)

    def set_duration(self, duration_minutes: int) -> SessionState:
        """
        Choose the game length during setup; the game clock follows it.

        Raises:
            InvalidStateTransition: If not in setup
            InvalidDuration: If the duration is not offered
        """
        self._require_status(GameStatus.SETUP, operation="change duration")
        if duration_minutes not in VALID_DURATIONS:
            raise InvalidDuration(
                f"Duration must be one of {VALID_DURATIONS} minutes, got {duration_minutes}"
            )
        return self._commit(
            duration_minutes=duration_minutes,
            game_time_remaining=duration_minutes * 60,
        )

    def update_settings(self, **changes: Any) -> Settings:
        """
        Apply settings changes (e.g. easy_mode=True, game_mode="experimental").

        Changes take effect from the next operation that reads them.

        Raises:
            ValueError: If a key is not a settings field
            pydantic.ValidationError: If a value is invalid
        """
        unknown = set(changes) - set(type(self.settings).model_fields)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        merged = {**self.settings.model_dump(), **changes}
        self.settings = type(self.settings)(**merged)
        logger.info(f"Settings updated: {sorted(changes)}")
        return self.settings

    def initialize_session(
        self,
        players: Sequence[Player],
        duration_minutes: int
    ) -> SessionState:
        """
        Start a new game: setup -> playing.

        Resets clocks and histories, clears the table and picks the first
        active player from an empty history. The game clock stays paused
        until the first turn starts.

        Args:
            players: Roster in seating order
            duration_minutes: Game length (5, 10 or 15)

        Returns:
            New session snapshot

        Raises:
            InvalidStateTransition: If a game is already playing
            InvalidRoster: If the roster violates size or id rules
            InvalidDuration: If the duration is not offered
        """
        previous = self._require_not_playing("initialize session")

        if duration_minutes not in VALID_DURATIONS:
            raise InvalidDuration(
                f"Duration must be one of {VALID_DURATIONS} minutes, got {duration_minutes}"
            )
        roster = validate_roster(
            players, self.settings.min_players, self.settings.max_players
        )

        first_player = select_next_player(roster, [], self.rng)

        self._state = SessionState(
            players=roster,
            duration_minutes=duration_minutes,
            game_status=GameStatus.PLAYING,
            active_player=first_player,
            game_time_remaining=duration_minutes * 60,
            turn_time_remaining=0,
            is_game_paused=True,
        )

        log_status_transition(
            from_status=previous.game_status.value,
            to_status=GameStatus.PLAYING.value,
            turn_number=1,
            game_time_remaining=self._state.game_time_remaining,
        )
        logger.info(
            f"Session initialized: {len(roster)} players, {duration_minutes} minutes, "
            f"first player {first_player.id}"
        )
        return self._state

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def start_turn(self) -> Instruction:
        """
        Activate a turn for the active player.

        Generates an instruction with the policy for the configured game
        mode, computes its time budget (plus the easy-mode bonus), and
        starts the game clock.

        Returns:
            The instruction for this turn

        Raises:
            InvalidStateTransition: If the game is not playing
            NoActivePlayer: If no player is active
            TurnAlreadyActive: If a turn is running or awaits timeout acknowledgement
        """
        snapshot = self._require_status(GameStatus.PLAYING, operation="start turn")

        if snapshot.active_player is None:
            raise NoActivePlayer("Cannot start a turn without an active player")

        if snapshot.is_turn_active or snapshot.is_turn_timed_out:
            raise TurnAlreadyActive(
                f"Turn {snapshot.turn_number} is already in progress"
            )

        policy = get_instruction_policy(
            self.settings.game_mode,
            rng=self.rng,
            knock_enabled=self.settings.knock_enabled,
        )
        instruction = policy.generate(snapshot.instruction_history, snapshot.stacks_exist)

        seconds = calculate_turn_time(
            instruction.pieces,
            len(snapshot.instruction_history),
            snapshot.percent_remaining,
        )
        if self.settings.easy_mode:
            seconds += self.settings.easy_mode_bonus_seconds

        events = [
            self._cue(CueType.TURN_START, snapshot),
            self._cue(CueType.INSTRUCTION_VOICE, snapshot, text=instruction.text),
        ]

        self._commit(
            current_instruction=instruction,
            turn_time_remaining=seconds,
            is_turn_active=True,
            is_turn_timed_out=False,
            is_game_paused=False,
        )

        log_turn_event(
            "Turn started",
            status=snapshot.game_status.value,
            turn_number=snapshot.turn_number,
            player_id=snapshot.active_player.id,
            instruction=instruction.type.value,
            pieces=instruction.pieces,
            turn_seconds=seconds,
        )

        self._publish(events)
        return instruction

    def end_turn(self, is_manual: bool = True) -> Player:
        """
        Finish the current turn and select the next player.

        Records the active player and the instruction in history, updates
        whether a scaffold is standing (NEW builds one, KNOCK clears the
        table), clears the turn and pauses the game clock.

        Args:
            is_manual: True when the player ended the turn in time

        Returns:
            The next active player

        Raises:
            InvalidStateTransition: If the game is not playing
            NoTurnInProgress: If no instruction is on the table
            TurnTimedOut: If a manual end arrives after the turn timed out
        """
        snapshot = self._require_status(GameStatus.PLAYING, operation="end turn")

        instruction = snapshot.current_instruction
        if instruction is None or snapshot.active_player is None:
            raise NoTurnInProgress("Cannot end a turn that was never started")

        if is_manual and snapshot.is_turn_timed_out:
            raise TurnTimedOut(
                f"Turn {snapshot.turn_number} timed out; acknowledge the timeout instead"
            )

        events = []
        if is_manual:
            events.append(self._cue(CueType.MANUAL_END, snapshot))
        events.append(self._cue(CueType.COUNTDOWN_STOP, snapshot))

        stacks_exist = snapshot.stacks_exist
        if instruction.builds_structure:
            stacks_exist = True
        elif instruction.clears_structure:
            stacks_exist = False

        turn_history = (*snapshot.turn_history, snapshot.active_player.id)
        next_player = select_next_player(snapshot.players, turn_history, self.rng)

        self._commit(
            turn_history=turn_history,
            instruction_history=(*snapshot.instruction_history, instruction),
            stacks_exist=stacks_exist,
            current_instruction=None,
            turn_time_remaining=0,
            is_turn_active=False,
            is_turn_timed_out=False,
            is_game_paused=True,
            active_player=next_player,
        )

        log_turn_event(
            "Turn ended",
            status=snapshot.game_status.value,
            turn_number=snapshot.turn_number,
            player_id=snapshot.active_player.id,
            manual=is_manual,
            next_player=next_player.id,
            stacks_exist=stacks_exist,
        )

        self._publish(events)
        return next_player

    def acknowledge_timeout(self) -> Player:
        """
        Accept a timed-out turn and move on, exactly like a non-manual end.

        Raises:
            TimeoutNotPending: If the current turn has not timed out
        """
        if not self._state.is_turn_timed_out:
            raise TimeoutNotPending("No timed-out turn to acknowledge")
        return self.end_turn(is_manual=False)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def pause(self) -> bool:
        """
        Stop both clocks. Idempotent.

        Returns:
            True if the clock was running and is now paused
        """
        snapshot = self._state
        if snapshot.is_game_paused:
            return False

        events = [self._cue(CueType.COUNTDOWN_STOP, snapshot)]
        self._commit(is_game_paused=True)
        logger.debug("Game clock paused")
        self._publish(events)
        return True

    def resume(self) -> bool:
        """
        Restart the clocks.

        Returns:
            True if the clock was paused and is now running

        Raises:
            InvalidStateTransition: If the game is not playing
            TurnTimedOut: If a timed-out turn awaits acknowledgement
        """
        snapshot = self._require_status(GameStatus.PLAYING, operation="resume")
        if snapshot.is_turn_timed_out:
            raise TurnTimedOut("Acknowledge the timed-out turn before resuming")
        if not snapshot.is_game_paused:
            return False

        self._commit(is_game_paused=False)
        logger.debug("Game clock resumed")
        return True

    def tick(self) -> SessionState:
        """
        Advance the clocks by one second.

        Does nothing unless the game is playing and unpaused. When the game
        clock runs out the game finishes. When the turn clock runs out the
        turn is marked timed out and the clock pauses; the player does not
        change until the timeout is acknowledged.

        Returns:
            Session snapshot after the tick
        """
        snapshot = self._state
        if snapshot.game_status != GameStatus.PLAYING or snapshot.is_game_paused:
            return snapshot

        if snapshot.game_time_remaining <= 1:
            events = []
            if snapshot.is_turn_active:
                events.append(self._cue(CueType.COUNTDOWN_STOP, snapshot))
            events.append(self._cue(CueType.GAME_OVER, snapshot))

            self._commit(
                game_time_remaining=0,
                game_status=GameStatus.FINISHED,
                is_game_paused=True,
                is_turn_active=False,
            )
            log_status_transition(
                from_status=GameStatus.PLAYING.value,
                to_status=GameStatus.FINISHED.value,
                turn_number=snapshot.turn_number,
                game_time_remaining=0,
            )
            self._publish(events)
            return self._state

        changes: dict[str, Any] = {
            "game_time_remaining": snapshot.game_time_remaining - 1,
        }
        events = []

        if snapshot.is_turn_active:
            next_turn_time = snapshot.turn_time_remaining - 1

            if next_turn_time <= 0:
                changes.update(
                    turn_time_remaining=0,
                    is_turn_active=False,
                    is_turn_timed_out=True,
                    is_game_paused=True,
                )
                events.append(self._cue(CueType.COUNTDOWN_STOP, snapshot))
                events.append(self._cue(CueType.TIMEOUT, snapshot))
                log_turn_event(
                    "Turn timed out",
                    status=snapshot.game_status.value,
                    turn_number=snapshot.turn_number,
                    player_id=snapshot.active_player.id if snapshot.active_player else None,
                    level="WARNING",
                )
            else:
                changes["turn_time_remaining"] = next_turn_time
                if next_turn_time == COUNTDOWN_SECONDS:
                    events.append(self._cue(CueType.COUNTDOWN, snapshot))

        self._commit(**changes)
        self._publish(events)
        return self._state

    # ------------------------------------------------------------------
    # End of game
    # ------------------------------------------------------------------

    def quit_session(self) -> SessionState:
        """
        Abandon the running game: playing -> setup. The roster is kept.

        Raises:
            InvalidStateTransition: If the game is not playing
        """
        snapshot = self._require_status(GameStatus.PLAYING, operation="quit")

        events = [self._cue(CueType.COUNTDOWN_STOP, snapshot)] if snapshot.is_turn_active else []

        self._commit(
            game_status=GameStatus.SETUP,
            is_game_paused=True,
            is_turn_active=False,
            is_turn_timed_out=False,
            current_instruction=None,
            turn_time_remaining=0,
            active_player=None,
            game_time_remaining=snapshot.total_game_seconds,
        )
        log_status_transition(
            from_status=GameStatus.PLAYING.value,
            to_status=GameStatus.SETUP.value,
            turn_number=snapshot.turn_number,
            game_time_remaining=snapshot.game_time_remaining,
        )
        self._publish(events)
        return self._state

    def declare_winner(self, player_id: str) -> SessionState:
        """
        Record the winner chosen after the game clock ran out: finished -> winner.

        Raises:
            InvalidStateTransition: If the game has not finished
            InvalidRoster: If player_id is not on the roster
        """
        snapshot = self._require_status(GameStatus.FINISHED, operation="declare winner")

        winner = next((p for p in snapshot.players if p.id == player_id), None)
        if winner is None:
            raise InvalidRoster(f"Unknown player id: {player_id}")

        self._commit(game_status=GameStatus.WINNER, winning_player=winner)
        log_status_transition(
            from_status=GameStatus.FINISHED.value,
            to_status=GameStatus.WINNER.value,
            turn_number=snapshot.turn_number,
        )
        logger.info(f"Winner declared: {winner.name} ({winner.id})")
        return self._state

    def _return_to_setup(self, players: tuple[Player, ...], operation: str) -> SessionState:
        snapshot = self._require_not_playing(operation)
        self._commit(
            game_status=GameStatus.SETUP,
            winning_player=None,
            players=players,
            active_player=None,
            current_instruction=None,
            is_turn_active=False,
            is_turn_timed_out=False,
            is_game_paused=True,
            turn_time_remaining=0,
            game_time_remaining=snapshot.total_game_seconds,
        )
        log_status_transition(
            from_status=snapshot.game_status.value,
            to_status=GameStatus.SETUP.value,
            turn_number=snapshot.turn_number,
        )
        return self._state

    def new_game(self) -> SessionState:
        """Return to setup with the default roster"""
        return self._return_to_setup(default_roster(), "start a new game")

    def rematch(self) -> SessionState:
        """Return to setup keeping the current roster and duration"""
        return self._return_to_setup(self._state.players, "start a rematch")
