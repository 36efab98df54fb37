# ABOUTME: Test helpers shared across unit and integration tests.
# ABOUTME: Builders for instruction histories and a cue recorder usable as a CueRouter subscriber.

from scaffold.models.cues import CueEvent
from scaffold.models.instruction import Instruction, InstructionType


def make_instruction(
    instruction_type: InstructionType,
    pieces: int = 1,
    text: str | None = None
) -> Instruction:
    """Helper to create history entries for generator and controller tests"""
    return Instruction(
        id=f"test-{instruction_type.value.lower()}-{pieces}",
        type=instruction_type,
        pieces=pieces,
        text=text or f"{instruction_type.value} instruction",
    )


def make_history(*types: InstructionType) -> list[Instruction]:
    """Helper to build an instruction history from a sequence of types"""
    return [make_instruction(t) for t in types]


class CueRecorder:
    """Cue handler that remembers everything it receives"""

    def __init__(self):
        self.events: list[CueEvent] = []

    def __call__(self, event: CueEvent) -> None:
        self.events.append(event)

    @property
    def cues(self) -> list[str]:
        return [e.cue.value for e in self.events]
