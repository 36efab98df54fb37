# ABOUTME: Pydantic model for a player on the session roster.
# ABOUTME: Players are immutable value objects; renaming yields a new Player with the same id.

from pydantic import BaseModel, Field


class Player(BaseModel):
    """A participant in the game, identified by a roster-unique id"""

    id: str = Field(
        description="Unique player identifier within the roster",
        min_length=1
    )
    name: str = Field(
        description="Display name shown when it is this player's turn"
    )

    model_config = {"frozen": True}
