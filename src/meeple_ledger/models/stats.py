"""Derived per-game aggregates and the rows returned by the stats engines."""

import datetime

from pydantic import BaseModel, Field

from meeple_ledger.models.game import Game


class MetricSnapshot(BaseModel):
    """Cumulative play aggregate for one game as of a cutoff year."""

    play_count: int = 0
    total_minutes: float = 0
    unique_dates: set[datetime.date] = Field(default_factory=set)

    @property
    def hours(self) -> float:
        return self.total_minutes / 60

    @property
    def sessions(self) -> int:
        """Number of distinct days the game was played."""
        return len(self.unique_dates)


# =============================================================================
# Tier Results
# =============================================================================


class TierMembership(BaseModel):
    """A game sitting inside a tier's range."""

    game: Game
    metric_value: float
    tier: str


class NewTierGame(BaseModel):
    """A game that entered a tier during the analysed year."""

    game: Game
    value: float
    this_year_value: float


class ValueClubGame(BaseModel):
    """Value club row: what was paid and what it bought."""

    game: Game
    metric_value: float
    cost_per_metric: float
    price_paid: float
    this_year_metric_value: float | None = None  # Only set for new entrants


class ValueClubCandidate(BaseModel):
    """A game outside a value club and how far it is from joining."""

    game: Game
    metric_value: float
    cost_per_metric: float
    price_paid: float
    additional_needed: float


class MilestoneChaser(BaseModel):
    """A game below its next milestone."""

    game: Game
    value: float
    target: float
    needed: float


# =============================================================================
# H-Index Results
# =============================================================================


class HIndexEntry(BaseModel):
    """One ranked row of an h-index breakdown."""

    game: Game
    value: float
    rank: int
    contributes: bool = False


class NewHIndexGame(BaseModel):
    """A game that started counting towards the h-index this year."""

    game: Game
    value: float
    this_year_value: float


class HIndexCandidates(BaseModel):
    """Games closest to lifting the h-index by one."""

    h_index: int
    target: int
    games_needed: int
    candidates: list[HIndexEntry] = Field(default_factory=list)
