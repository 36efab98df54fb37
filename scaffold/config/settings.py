# ABOUTME: Configuration settings for the Scaffold rules engine using Pydantic Settings.
# ABOUTME: Loads game-mode, easy-mode, cue and roster limits from the environment with type-safe access.

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scaffold.models.session import VALID_DURATIONS, GameMode

# Levels accepted by setup_logging and the log_level setting
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    # Game Rules
    game_mode: GameMode = Field(
        default=GameMode.STANDARD,
        description="Instruction policy used for new turns (standard or experimental)"
    )
    knock_enabled: bool = Field(
        default=True,
        description="Include KNOCK instructions in the standard content pool"
    )
    default_duration_minutes: int = Field(
        default=10,
        description="Game length offered by default (5, 10 or 15 minutes)"
    )

    # Easy Mode
    easy_mode: bool = Field(
        default=False,
        description="Grant extra seconds on every turn"
    )
    easy_mode_bonus_seconds: int = Field(
        default=10,
        ge=0,
        description="Seconds added to each turn when easy mode is on"
    )

    # Cue Settings
    sound_enabled: bool = Field(
        default=True,
        description="Master switch for sound cues"
    )
    voice_enabled: bool = Field(
        default=True,
        description="Emit voice cues carrying the instruction text"
    )

    # Roster Limits
    min_players: int = Field(
        default=2,
        ge=1,
        description="Minimum number of players in a session"
    )
    max_players: int = Field(
        default=6,
        ge=1,
        description="Maximum number of players in a session"
    )

    # Application Settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for rotating log files"
    )

    model_config = SettingsConfigDict(
        env_prefix="SCAFFOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("default_duration_minutes")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        """Only the durations offered by the game-length picker are allowed"""
        if v not in VALID_DURATIONS:
            raise ValueError(
                f"default_duration_minutes must be one of {VALID_DURATIONS}, got {v}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to upper case and reject levels setup_logging would refuse"""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}, got {v!r}")
        return level

    @model_validator(mode="after")
    def validate_roster_limits(self):
        """Ensure min_players does not exceed max_players"""
        if self.min_players > self.max_players:
            raise ValueError(
                f"min_players ({self.min_players}) cannot exceed "
                f"max_players ({self.max_players})"
            )
        return self


# Singleton settings instance - lazy initialization to allow import without .env
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the singleton settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
