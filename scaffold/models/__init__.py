"""Data models for the Scaffold rules engine"""

from .cues import (
    SOUND_CUES,
    VOICE_CUES,
    CueEvent,
    CueType,
)
from .instruction import (
    Instruction,
    InstructionType,
)
from .player import Player
from .session import (
    VALID_DURATIONS,
    GameDuration,
    GameMode,
    GameStatus,
    SessionState,
)

__all__ = [
    # Roster models
    "Player",
    # Instruction models
    "InstructionType",
    "Instruction",
    # Session models
    "GameStatus",
    "GameMode",
    "GameDuration",
    "SessionState",
    "VALID_DURATIONS",
    # Cue models
    "CueType",
    "CueEvent",
    "SOUND_CUES",
    "VOICE_CUES",
]
