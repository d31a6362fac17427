"""Play milestones: fives, dimes, quarters and centuries.

Milestones are an ascending tier collection over a play metric. A game
that has never been played has no milestone value at all.
"""

from collections.abc import Mapping, Sequence

from meeple_ledger.models import Game, Metric, MetricSnapshot, MilestoneChaser, NewTierGame, Play, TierMembership
from meeple_ledger.stats import tier_engine
from meeple_ledger.stats.aggregate import aggregate, filter_plays_by_year, metric_selector
from meeple_ledger.stats.tier_engine import GameFilter
from meeple_ledger.stats.tiers import Direction, TierCollection, create_tier_collection

MILESTONE_THRESHOLDS = {
    "FIVES": 5,
    "DIMES": 10,
    "QUARTERS": 25,
    "CENTURIES": 100,
}


def milestone_collection(thresholds: Mapping[str, float] | None = None) -> TierCollection:
    """Build the milestone ladder (defaults to 5/10/25/100)."""
    return create_tier_collection(thresholds or MILESTONE_THRESHOLDS, Direction.ASCENDING)


def milestone_value(game: Game, snapshot: MetricSnapshot | None, metric: Metric) -> float | None:
    if snapshot is None:
        return None
    return metric_selector(snapshot, metric)


def get_milestone_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    milestones: TierCollection,
    tier: str,
    game_filter: GameFilter | None = None,
) -> list[TierMembership]:
    """Games inside a milestone's range through ``year``, highest value first."""
    return tier_engine.get_games_in_tier(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=milestones,
        tier=tier,
        get_game_value=milestone_value,
        game_filter=game_filter,
    )


def count_milestone_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    milestones: TierCollection,
    tier: str,
    game_filter: GameFilter | None = None,
) -> int:
    return tier_engine.count_games_in_tier(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=milestones,
        tier=tier,
        get_game_value=milestone_value,
        game_filter=game_filter,
    )


def calculate_milestone_increase(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    milestones: TierCollection,
    tier: str,
    game_filter: GameFilter | None = None,
) -> int:
    return tier_engine.calculate_tier_increase(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=milestones,
        tier=tier,
        get_game_value=milestone_value,
        game_filter=game_filter,
    )


def get_new_milestone_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    milestones: TierCollection,
    tier: str,
    game_filter: GameFilter | None = None,
) -> list[NewTierGame]:
    """Games that reached a milestone during ``year``, with what they added that year."""
    return tier_engine.get_new_tier_games(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=milestones,
        tier=tier,
        get_game_value=milestone_value,
        game_filter=game_filter,
    )


def get_skipped_milestone_count(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    milestones: TierCollection,
    tier: str,
    game_filter: GameFilter | None = None,
) -> int:
    return tier_engine.get_skipped_tier_count(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=milestones,
        tier=tier,
        get_game_value=milestone_value,
        game_filter=game_filter,
    )


def get_milestones(
    games: Sequence[Game],
    plays: Sequence[Play],
    year: int | None,
    metric: Metric,
    milestones: TierCollection,
) -> dict[str, list[TierMembership]]:
    """Bucket every played game into its milestone.

    Unlike the cumulative queries above, a ``year`` here means plays logged
    during that year only.

    Returns:
        Every tier name mapped to its games, highest value first. Games
        below the entry tier are left out.
    """
    snapshots = aggregate(filter_plays_by_year(plays, year))
    buckets: dict[str, list[TierMembership]] = {name: [] for name in milestones.names}

    for game in games:
        value = milestone_value(game, snapshots.get(game.id), metric)
        if value is None:
            continue
        tier = milestones.get_tier_for_value(value)
        if tier is not None:
            buckets[tier].append(TierMembership(game=game, metric_value=value, tier=tier))

    for rows in buckets.values():
        rows.sort(key=lambda row: row.metric_value, reverse=True)
    return buckets


def get_milestone_chasers(
    games: Sequence[Game],
    plays: Sequence[Play],
    metric: Metric,
    milestones: TierCollection,
    year: int | None = None,
) -> list[MilestoneChaser]:
    """Played games that still have a milestone ahead of them, closest first.

    Args:
        year: Cutoff year (inclusive), or None for all time.
    """
    snapshots = aggregate(plays, year)
    chasers = []
    for game in games:
        value = milestone_value(game, snapshots.get(game.id), metric)
        if value is None:
            continue
        target = milestones.get_next_target(value)
        if target is None:
            continue
        chasers.append(MilestoneChaser(game=game, value=value, target=target, needed=target - value))

    chasers.sort(key=lambda chaser: (chaser.needed, -chaser.value))
    return chasers
