# ABOUTME: Pydantic models for cue events emitted by the session controller.
# ABOUTME: Cues tell the external audio/voice layer when something happened; the engine never plays audio itself.

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class CueType(str, Enum):
    """Moments the audio/voice layer can react to"""
    TURN_START = "turn_start"  # Whistle
    INSTRUCTION_VOICE = "instruction_voice"  # Speak the instruction text
    COUNTDOWN = "countdown"  # Ten seconds left on the turn
    COUNTDOWN_STOP = "countdown_stop"  # Silence any running countdown
    TIMEOUT = "timeout"  # Turn ran out of time
    MANUAL_END = "manual_end"  # Player finished in time
    GAME_OVER = "game_over"  # Game clock reached zero


# Cues gated by the sound master switch
SOUND_CUES = frozenset({
    CueType.TURN_START,
    CueType.COUNTDOWN,
    CueType.TIMEOUT,
    CueType.MANUAL_END,
    CueType.GAME_OVER,
})

# Cues gated by the voice switch
VOICE_CUES = frozenset({CueType.INSTRUCTION_VOICE})


class CueEvent(BaseModel):
    """A single cue emitted by the controller"""

    cue: CueType
    timestamp: datetime
    turn_number: int = Field(
        ge=1,
        description="Turn the cue belongs to (1-based)"
    )
    player_id: str | None = Field(
        default=None,
        description="Active player when the cue fired"
    )
    text: str | None = Field(
        default=None,
        description="Payload for voice cues"
    )

    model_config = {"frozen": True}

    @field_validator("timestamp")
    @classmethod
    def validate_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure timestamp is timezone-aware"""
        if v.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")
        return v
