# ABOUTME: Orchestration layer exports for session control, roster setup and cue routing.
# ABOUTME: Provides the GameSessionController state machine and the in-process CueRouter.

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
from scaffold.orchestration.session_controller import GameSessionController

__all__ = [
    "GameSessionController",
    "CueRouter",
    "InvalidDuration",
    "InvalidRoster",
    "InvalidStateTransition",
    "NoActivePlayer",
    "NoTurnInProgress",
    "TimeoutNotPending",
    "TurnAlreadyActive",
    "TurnTimedOut",
]
