# ABOUTME: Pydantic models for turn instructions: the InstructionType enum and the immutable Instruction.
# ABOUTME: An instruction tells the active player which physical action to perform with how many pieces.

from enum import Enum

from pydantic import BaseModel, Field


class InstructionType(str, Enum):
    """Category of physical action demanded by an instruction"""
    NEW = "NEW"  # Start a new scaffold
    ADD = "ADD"  # Place pieces on an existing scaffold
    KNOCK = "KNOCK"  # Knock a scaffold down
    REMOVE = "REMOVE"  # Take pieces off a scaffold


# Instruction types that leave a structure standing after the turn
STRUCTURE_BUILDING_TYPES = frozenset({InstructionType.NEW})
# Instruction types that clear the table
STRUCTURE_CLEARING_TYPES = frozenset({InstructionType.KNOCK})


class Instruction(BaseModel):
    """
    A single generated turn instruction.

    Instructions are immutable once created and are appended to the
    session's instruction history when the turn ends.

    Example:
        Instruction(
            id="5f0c...",
            type=InstructionType.ADD,
            pieces=2,
            orientation="vertically",
            text="Place 2 pieces vertically on top of any existing scaffold.",
            secondary_text="If there are no scaffolds, start a new one."
        )
    """

    id: str = Field(
        description="Unique instruction identifier"
    )
    type: InstructionType
    pieces: int = Field(
        ge=0,
        description="Number of pieces the player must handle (0 for KNOCK)"
    )
    orientation: str | None = Field(
        default=None,
        description="Required orientation for ADD ('horizontally', 'vertically'), None if unconstrained"
    )
    text: str = Field(
        min_length=1,
        description="Primary display string"
    )
    secondary_text: str | None = Field(
        default=None,
        description="Optional qualifier shown beneath the primary text"
    )

    model_config = {"frozen": True}

    @property
    def builds_structure(self) -> bool:
        """Whether completing this instruction leaves a scaffold on the table"""
        return self.type in STRUCTURE_BUILDING_TYPES

    @property
    def clears_structure(self) -> bool:
        """Whether completing this instruction clears the table"""
        return self.type in STRUCTURE_CLEARING_TYPES
