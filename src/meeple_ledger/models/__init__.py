"""Data models for Meeple Ledger."""

from meeple_ledger.models.game import (
    # Collection records
    Game,
    GameCopy,
    Metric,
    Play,
)
from meeple_ledger.models.stats import (
    # Aggregates
    MetricSnapshot,
    # Tier results
    MilestoneChaser,
    NewTierGame,
    TierMembership,
    ValueClubCandidate,
    ValueClubGame,
    # H-index results
    HIndexCandidates,
    HIndexEntry,
    NewHIndexGame,
)

__all__ = [
    # Collection records
    "Game",
    "GameCopy",
    "Metric",
    "Play",
    # Aggregates
    "MetricSnapshot",
    # Tier results
    "MilestoneChaser",
    "NewTierGame",
    "TierMembership",
    "ValueClubCandidate",
    "ValueClubGame",
    # H-index results
    "HIndexCandidates",
    "HIndexEntry",
    "NewHIndexGame",
]
