"""Core data models for games, copies and logged plays."""

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Records arrive as camelCase JSON from the collection export; snake_case
# names are accepted too so tests and callers can build them directly.
RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class Metric(str, Enum):
    """Play metrics a game can be measured by."""

    HOURS = "hours"
    SESSIONS = "sessions"  # Distinct days played
    PLAYS = "plays"


# =============================================================================
# Collection Records
# =============================================================================


class GameCopy(BaseModel):
    """A physical copy of a game in the collection."""

    model_config = RECORD_CONFIG

    copy_id: str | None = None
    status_owned: bool = False
    acquisition_date: datetime.date | None = None
    price_paid: float | None = None
    currency: str | None = None

    @field_validator("price_paid", mode="before")
    @classmethod
    def blank_price_is_unknown(cls, v):
        # The export writes an empty string for "no price recorded"
        if v == "":
            return None
        return v


class Game(BaseModel):
    """A game in the collection."""

    model_config = RECORD_CONFIG

    id: int = Field(description="BoardGameGeek object id")
    name: str = ""
    is_base_game: bool = True
    is_expansion: bool = False
    is_expandalone: bool = False
    copies: tuple[GameCopy, ...] = ()

    @property
    def owned_copies(self) -> list[GameCopy]:
        """Copies currently in the collection."""
        return [copy for copy in self.copies if copy.status_owned]


class Play(BaseModel):
    """A single logged play of a game."""

    model_config = RECORD_CONFIG

    game_id: int
    date: datetime.date
    duration_min: float = 0
    duration_estimated: bool = False
    copy_id: str | None = None  # None when played on someone else's copy
    players: tuple[int, ...] | None = None
    location_id: int | None = None

    @field_validator("duration_min", mode="before")
    @classmethod
    def missing_duration_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def year(self) -> int:
        return self.date.year
