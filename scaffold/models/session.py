# ABOUTME: Pydantic models for the game session: status and mode enums plus the SessionState snapshot.
# ABOUTME: SessionState is frozen; the controller replaces it wholesale so readers never see partial updates.

from enum import Enum
from typing import Literal, get_args

from pydantic import BaseModel, Field, model_validator

from scaffold.models.instruction import Instruction
from scaffold.models.player import Player

# Game lengths offered by the game-length picker, in minutes
GameDuration = Literal[5, 10, 15]

VALID_DURATIONS: tuple[int, ...] = get_args(GameDuration)


class GameStatus(str, Enum):
    """Lifecycle states of a game session"""
    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"
    WINNER = "winner"


class GameMode(str, Enum):
    """Instruction content policy selected in settings"""
    STANDARD = "standard"  # Game A: follow instructions against the clock
    EXPERIMENTAL = "experimental"  # Game B: adds shape and destructive challenges


class SessionState(BaseModel):
    """Immutable snapshot of one game session"""

    # Roster
    players: tuple[Player, ...] = Field(default_factory=tuple)
    duration_minutes: GameDuration = 10
    game_status: GameStatus = GameStatus.SETUP
    winning_player: Player | None = None

    # Table state
    stacks_exist: bool = False

    # Turn state
    active_player: Player | None = None
    current_instruction: Instruction | None = None
    is_turn_active: bool = False
    is_turn_timed_out: bool = False

    # Clocks (seconds)
    game_time_remaining: int = Field(default=600, ge=0)
    turn_time_remaining: int = Field(default=0, ge=0)
    is_game_paused: bool = True

    # Histories
    turn_history: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Player ids, one per completed turn"
    )
    instruction_history: tuple[Instruction, ...] = Field(
        default_factory=tuple,
        description="Instructions of completed turns, oldest first"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_active_player_on_roster(self):
        """The active player must be on the roster while the game is playing"""
        if self.game_status == GameStatus.PLAYING and self.active_player is not None:
            if self.active_player.id not in {p.id for p in self.players}:
                raise ValueError(
                    f"active_player '{self.active_player.id}' is not on the roster"
                )
        return self

    @property
    def total_game_seconds(self) -> int:
        """Full game length in seconds"""
        return self.duration_minutes * 60

    @property
    def percent_remaining(self) -> float:
        """Percentage of total game time still on the clock (0-100)"""
        return (self.game_time_remaining / self.total_game_seconds) * 100

    @property
    def completed_turns(self) -> int:
        """Number of turns that have ended this session"""
        return len(self.turn_history)

    @property
    def turn_number(self) -> int:
        """1-based number of the turn currently being played or about to start"""
        return self.completed_turns + 1
