# ABOUTME: Rules layer exports: turn-time calculator, instruction policies and turn rotation.
# ABOUTME: Everything here is a pure function of its inputs and an injected random source.

from scaffold.rules.exceptions import NoPlayersAvailable
from scaffold.rules.instructions import (
    ExperimentalInstructionPolicy,
    InstructionPolicy,
    StandardInstructionPolicy,
    generate_instruction,
    get_instruction_policy,
)
from scaffold.rules.rotation import select_next_player
from scaffold.rules.turn_time import calculate_turn_time

__all__ = [
    "calculate_turn_time",
    "generate_instruction",
    "get_instruction_policy",
    "InstructionPolicy",
    "StandardInstructionPolicy",
    "ExperimentalInstructionPolicy",
    "select_next_player",
    "NoPlayersAvailable",
]
