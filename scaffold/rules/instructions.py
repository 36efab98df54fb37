# ABOUTME: Instruction generator with Standard and Experimental content policies.
# ABOUTME: Weighted random draws constrained by recent instruction history, rendered through fixed text templates.

import random
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from scaffold.models.instruction import Instruction, InstructionType
from scaffold.models.session import GameMode

# Orientations for ADD; None means any orientation
ORIENTATIONS: tuple[str | None, ...] = ("horizontally", "vertically", None)

STANDARD_NEW_PIECES = (1, 6)
EXPERIMENTAL_NEW_PIECES = (2, 6)
ADD_PIECES = (1, 3)
REMOVE_PIECES = 3

# Weighted content pools for the standard policy (weights sum to 100)
STANDARD_WEIGHTS: tuple[tuple[InstructionType, int], ...] = (
    (InstructionType.ADD, 50),
    (InstructionType.NEW, 30),
    (InstructionType.KNOCK, 10),
    (InstructionType.REMOVE, 10),
)
STANDARD_WEIGHTS_WITHOUT_KNOCK: tuple[tuple[InstructionType, int], ...] = (
    (InstructionType.ADD, 60),
    (InstructionType.NEW, 30),
    (InstructionType.REMOVE, 10),
)

MAX_DRAW_ATTEMPTS = 20
FALLBACK_TYPE = InstructionType.ADD

# Experimental tier thresholds on a single uniform roll
DESTRUCTIVE_CHANCE = 0.15
SHAPE_CHALLENGE_CHANCE = 0.20
FILLER_ADD_PERCENT = 85

SHAPE_CHALLENGES: tuple[tuple[str, int], ...] = (
    ("Make a horse shape using 6 pieces", 6),
    ("Make a goal using 3 pieces", 3),
    ("Make a letter H using 5 pieces", 5),
    ("Make a letter A using 6 pieces", 6),
)


@dataclass(frozen=True)
class DestructiveChallenge:
    """Fixed flavor text for the experimental destructive tier"""
    text: str
    secondary_text: str
    type: InstructionType
    pieces: int


DESTRUCTIVE_CHALLENGES: tuple[DestructiveChallenge, ...] = (
    DestructiveChallenge(
        text="Demolish a tower!",
        secondary_text="No pieces from any other towers must fall",
        type=InstructionType.KNOCK,
        pieces=0,
    ),
    DestructiveChallenge(
        text="Blow 1 piece off!",
        secondary_text="No other pieces must fall…",
        type=InstructionType.NEW,
        pieces=0,
    ),
)


@dataclass(frozen=True)
class RecencyRule:
    """
    Constraint on how often an instruction type may appear.

    The type is disallowed up to and including turn `after_turn`, and
    disallowed while it appears in the last `window` instructions.
    """
    window: int
    after_turn: int = 0


RECENCY_RULES: dict[InstructionType, RecencyRule] = {
    InstructionType.NEW: RecencyRule(window=4),
    InstructionType.KNOCK: RecencyRule(window=5, after_turn=4),
    InstructionType.REMOVE: RecencyRule(window=5, after_turn=6),
}


# ============================================================================
# Helpers
# ============================================================================


def piece_text(count: int) -> str:
    """Singular or plural noun for a piece count"""
    return "piece" if count == 1 else "pieces"


def new_instruction_id(rng: random.Random) -> str:
    """Random UUID4 string drawn from `rng` so seeded runs are reproducible"""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def count_type_in_window(
    history: Sequence[Instruction],
    window: int,
    instruction_type: InstructionType
) -> int:
    """Number of `instruction_type` instructions among the last `window` entries"""
    if window <= 0:
        return 0
    return sum(1 for i in history[-window:] if i.type == instruction_type)


def is_instruction_allowed(
    instruction_type: InstructionType,
    history: Sequence[Instruction]
) -> bool:
    """
    Check a candidate type against the recency rules.

    Args:
        instruction_type: Candidate type
        history: Past instructions, oldest first

    Returns:
        True if the candidate may be issued on the next turn
    """
    rule = RECENCY_RULES.get(instruction_type)
    if rule is None:
        return True

    turn_count = len(history) + 1
    if turn_count <= rule.after_turn:
        return False

    return count_type_in_window(history, rule.window, instruction_type) == 0


def weighted_choice(
    weights: Sequence[tuple[InstructionType, int]],
    rng: random.Random
) -> InstructionType:
    """Draw one type from a discrete weighted distribution"""
    total = sum(weight for _, weight in weights)
    roll = rng.random() * total
    cumulative = 0
    for instruction_type, weight in weights:
        cumulative += weight
        if roll < cumulative:
            return instruction_type
    return FALLBACK_TYPE


# ============================================================================
# Templates
# ============================================================================


def build_new(
    rng: random.Random,
    piece_range: tuple[int, int] = STANDARD_NEW_PIECES
) -> Instruction:
    """Start a new scaffold with a random number of pieces"""
    pieces = rng.randint(*piece_range)
    return Instruction(
        id=new_instruction_id(rng),
        type=InstructionType.NEW,
        pieces=pieces,
        text=f"Create a new scaffold using {pieces} {piece_text(pieces)}",
    )


def build_add(rng: random.Random) -> Instruction:
    """Place pieces on an existing scaffold, optionally in a fixed orientation"""
    pieces = rng.randint(*ADD_PIECES)
    orientation = rng.choice(ORIENTATIONS)

    placement = "on top of any existing scaffold"
    if orientation:
        placement = f"{orientation} {placement}"

    return Instruction(
        id=new_instruction_id(rng),
        type=InstructionType.ADD,
        pieces=pieces,
        orientation=orientation,
        text=f"Place {pieces} {piece_text(pieces)} {placement}.",
        secondary_text="If there are no scaffolds, start a new one.",
    )


def build_remove(rng: random.Random) -> Instruction:
    """Take pieces off a scaffold and hand them out"""
    return Instruction(
        id=new_instruction_id(rng),
        type=InstructionType.REMOVE,
        pieces=REMOVE_PIECES,
        text=(
            f"Remove up to {REMOVE_PIECES} pieces from any scaffold "
            f"to give to other players."
        ),
        secondary_text=(
            "Keep any pieces that fall. "
            "If there are no scaffolds, take one piece."
        ),
    )


def build_knock(rng: random.Random) -> Instruction:
    """Knock a tall scaffold down"""
    return Instruction(
        id=new_instruction_id(rng),
        type=InstructionType.KNOCK,
        pieces=0,
        text="Knock down any scaffold that is 3 pieces high or more.",
        secondary_text="If any pieces from other scaffolds fall, keep a maximum of 2.",
    )


def build_instruction(
    instruction_type: InstructionType,
    rng: random.Random,
    new_piece_range: tuple[int, int] = STANDARD_NEW_PIECES
) -> Instruction:
    """Render the template for `instruction_type`"""
    if instruction_type == InstructionType.NEW:
        return build_new(rng, new_piece_range)
    if instruction_type == InstructionType.ADD:
        return build_add(rng)
    if instruction_type == InstructionType.REMOVE:
        return build_remove(rng)
    return build_knock(rng)


def build_shape_challenge(rng: random.Random) -> Instruction:
    """Pick a curated shape challenge"""
    text, pieces = rng.choice(SHAPE_CHALLENGES)
    return Instruction(
        id=new_instruction_id(rng),
        type=InstructionType.NEW,
        pieces=pieces,
        text=text,
    )


def build_destructive_challenge(rng: random.Random) -> Instruction:
    """Pick a curated destructive challenge"""
    pick = rng.choice(DESTRUCTIVE_CHALLENGES)
    return Instruction(
        id=new_instruction_id(rng),
        type=pick.type,
        pieces=pick.pieces,
        text=pick.text,
        secondary_text=pick.secondary_text,
    )


# ============================================================================
# Policies
# ============================================================================


class InstructionPolicy(Protocol):
    """Shared contract of the instruction content policies"""

    def generate(
        self,
        history: Sequence[Instruction],
        stacks_exist: bool
    ) -> Instruction:
        ...


class StandardInstructionPolicy:
    """
    Game A content: weighted ADD/NEW/KNOCK/REMOVE with recency rules.

    Turn 1, or any turn with no scaffold on the table, is always NEW.
    Otherwise types are drawn by weight and re-drawn (up to
    MAX_DRAW_ATTEMPTS times) until one passes is_instruction_allowed();
    if every draw fails, the turn falls back to ADD.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        knock_enabled: bool = True,
        max_attempts: int = MAX_DRAW_ATTEMPTS
    ):
        """
        Initialize standard policy.

        Args:
            rng: Random source (default: a fresh unseeded random.Random)
            knock_enabled: Include KNOCK in the content pool
            max_attempts: Draws before falling back to ADD
        """
        self.rng = rng or random.Random()
        self.weights = STANDARD_WEIGHTS if knock_enabled else STANDARD_WEIGHTS_WITHOUT_KNOCK
        self.max_attempts = max_attempts

    def generate(
        self,
        history: Sequence[Instruction],
        stacks_exist: bool
    ) -> Instruction:
        """
        Generate the next instruction.

        Args:
            history: Past instructions, oldest first
            stacks_exist: Whether any scaffold is currently standing

        Returns:
            New Instruction
        """
        if not history or not stacks_exist:
            return build_new(self.rng)

        for attempt in range(1, self.max_attempts + 1):
            candidate = weighted_choice(self.weights, self.rng)
            if is_instruction_allowed(candidate, history):
                return build_instruction(candidate, self.rng)
            logger.debug(f"Draw {attempt} rejected {candidate.value} by recency rules")

        logger.debug(
            f"No valid draw in {self.max_attempts} attempts, "
            f"falling back to {FALLBACK_TYPE.value}"
        )
        return build_instruction(FALLBACK_TYPE, self.rng)


class ExperimentalInstructionPolicy:
    """
    Game B content: standard instructions mixed with curated challenges.

    With no scaffold standing (or on turn 1) a coin flip chooses between a
    standard NEW and a shape challenge. Afterwards a single roll picks the
    tier: destructive (15%), shape challenge (20%), or filler that reuses the
    standard ADD/NEW templates at 85/15. Recency rules do not apply.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate(
        self,
        history: Sequence[Instruction],
        stacks_exist: bool
    ) -> Instruction:
        if not history or not stacks_exist:
            if self.rng.random() < 0.5:
                return build_new(self.rng, EXPERIMENTAL_NEW_PIECES)
            return build_shape_challenge(self.rng)

        roll = self.rng.random()

        if roll < DESTRUCTIVE_CHANCE:
            return build_destructive_challenge(self.rng)

        if roll < DESTRUCTIVE_CHANCE + SHAPE_CHALLENGE_CHANCE:
            return build_shape_challenge(self.rng)

        if self.rng.random() * 100 < FILLER_ADD_PERCENT:
            return build_add(self.rng)
        return build_new(self.rng, EXPERIMENTAL_NEW_PIECES)


def get_instruction_policy(
    mode: GameMode,
    rng: random.Random | None = None,
    knock_enabled: bool = True
) -> InstructionPolicy:
    """
    Create the content policy for a game mode.

    Args:
        mode: Configured game mode
        rng: Random source shared by the policy
        knock_enabled: Include KNOCK in the standard pool (ignored by experimental)

    Returns:
        Policy instance

    Raises:
        ValueError: If mode is not a known GameMode
    """
    mode = GameMode(mode)
    if mode == GameMode.EXPERIMENTAL:
        return ExperimentalInstructionPolicy(rng=rng)
    return StandardInstructionPolicy(rng=rng, knock_enabled=knock_enabled)


def generate_instruction(
    history: Sequence[Instruction],
    stacks_exist: bool,
    mode: GameMode = GameMode.STANDARD,
    rng: random.Random | None = None,
    knock_enabled: bool = True
) -> Instruction:
    """
    Generate one instruction with the policy for `mode`.

    Examples:
        >>> rng = random.Random(7)
        >>> generate_instruction([], stacks_exist=False, rng=rng).type
        <InstructionType.NEW: 'NEW'>

    Args:
        history: Past instructions, oldest first
        stacks_exist: Whether any scaffold is currently standing
        mode: Content policy to use
        rng: Random source (default: a fresh unseeded random.Random)
        knock_enabled: Include KNOCK in the standard pool

    Returns:
        New Instruction
    """
    policy = get_instruction_policy(mode, rng=rng, knock_enabled=knock_enabled)
    return policy.generate(history, stacks_exist)
