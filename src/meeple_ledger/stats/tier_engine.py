"""Generic tier membership and year-over-year transition queries.

Every query takes the full game and play lists plus:

- ``tier_collection`` / ``tier``: which ladder, and which rung of it.
- ``get_game_value(game, snapshot, metric)``: the number the ladder
  classifies, or None when it cannot be computed for that game. None
  excludes the game; it is never read as zero.
- ``game_filter(game)``: optional eligibility check (default: every game).

Snapshots are rebuilt from the play log for each cutoff year on every call.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from meeple_ledger.models import Game, Metric, MetricSnapshot, NewTierGame, Play, TierMembership
from meeple_ledger.stats.aggregate import aggregate, metric_delta
from meeple_ledger.stats.tiers import TierCollection

logger = logging.getLogger(__name__)

GameValueGetter = Callable[[Game, MetricSnapshot | None, Metric], float | None]
ThisYearValueGetter = Callable[[Game, MetricSnapshot | None, MetricSnapshot | None, Metric], float]
GameFilter = Callable[[Game], bool]


def require_year(year: int | None, operation: str) -> int:
    """Reject a missing year for queries that compare against the year before."""
    if year is None:
        raise ValueError(f"{operation} compares two years and needs a concrete year, not None")
    return year


def _accept_all(game: Game) -> bool:
    return True


def _game_values(
    games: Sequence[Game],
    snapshots: dict[int, MetricSnapshot],
    metric: Metric,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None,
):
    """Yield ``(game, snapshot, value)`` for eligible games with a computable value."""
    game_filter = game_filter or _accept_all
    for game in games:
        if not game_filter(game):
            continue
        snapshot = snapshots.get(game.id)
        value = get_game_value(game, snapshot, metric)
        if value is None:
            continue
        yield game, snapshot, value


def get_games_in_tier(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    tier_collection: TierCollection,
    tier: str,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None = None,
    get_game_details: Callable[[Game, MetricSnapshot | None, float, Metric], Any] | None = None,
) -> list:
    """List the games whose value sits inside ``tier``'s range as of ``year``.

    Args:
        year: Cutoff year (inclusive), or None for all time.
        get_game_details: Optional row builder ``(game, snapshot, value, metric)``.
            Defaults to :class:`TierMembership` rows.

    Returns:
        Rows ordered most extreme value first: highest first for ascending
        collections, lowest first for descending ones.
    """
    snapshots = aggregate(plays, year)
    ranked = []
    for game, snapshot, value in _game_values(games, snapshots, metric, get_game_value, game_filter):
        if not tier_collection.is_value_in_tier(value, tier):
            continue
        if get_game_details is not None:
            row = get_game_details(game, snapshot, value, metric)
        else:
            row = TierMembership(game=game, metric_value=value, tier=tier)
        ranked.append((value, row))

    ranked.sort(key=lambda item: tier_collection.extreme_first_key(item[0]))
    return [row for _, row in ranked]


def count_games_in_tier(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    tier_collection: TierCollection,
    tier: str,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None = None,
) -> int:
    """Count games inside ``tier``'s range as of ``year`` (None = all time)."""
    snapshots = aggregate(plays, year)
    count = sum(
        1
        for _, _, value in _game_values(games, snapshots, metric, get_game_value, game_filter)
        if tier_collection.is_value_in_tier(value, tier)
    )
    logger.debug("%d games in tier %s through %s", count, tier, year or "all time")
    return count


def calculate_tier_increase(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    tier_collection: TierCollection,
    tier: str,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None = None,
) -> int:
    """Change in ``tier``'s membership count between ``year - 1`` and ``year``.

    Can be negative: a game leaves a tier's range by advancing past it.
    """
    year = require_year(year, "calculate_tier_increase")
    query = dict(
        metric=metric,
        tier_collection=tier_collection,
        tier=tier,
        get_game_value=get_game_value,
        game_filter=game_filter,
    )
    current = count_games_in_tier(games, plays, year=year, **query)
    previous = count_games_in_tier(games, plays, year=year - 1, **query)
    return current - previous


def get_new_tier_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    tier_collection: TierCollection,
    tier: str,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None = None,
    get_this_year_value: ThisYearValueGetter = metric_delta,
    get_game_details: Callable[[Game, MetricSnapshot | None, float, float, Metric], Any] | None = None,
) -> list:
    """Games inside ``tier`` at the end of ``year`` that had not reached it a year earlier.

    A game that was already at or beyond the tier last year is not new, even
    if it only now sits inside the tier's own range.

    Args:
        get_this_year_value: ``(game, current, previous, metric)`` giving the
            amount added during ``year``. Defaults to the metric delta.
        get_game_details: Optional row builder
            ``(game, snapshot, value, this_year_value, metric)``. Defaults to
            :class:`NewTierGame` rows.

    Returns:
        Rows ordered most extreme value first, ties keeping game order.
    """
    year = require_year(year, "get_new_tier_games")
    current_snapshots = aggregate(plays, year)
    previous_snapshots = aggregate(plays, year - 1)

    ranked = []
    for game, snapshot, value in _game_values(
        games, current_snapshots, metric, get_game_value, game_filter
    ):
        if not tier_collection.is_value_in_tier(value, tier):
            continue

        previous_snapshot = previous_snapshots.get(game.id)
        previous_value = get_game_value(game, previous_snapshot, metric)
        if previous_value is not None and tier_collection.is_value_at_or_beyond_tier(previous_value, tier):
            continue

        this_year_value = get_this_year_value(game, snapshot, previous_snapshot, metric)
        if get_game_details is not None:
            row = get_game_details(game, snapshot, value, this_year_value, metric)
        else:
            row = NewTierGame(game=game, value=value, this_year_value=this_year_value)
        ranked.append((value, row))

    ranked.sort(key=lambda item: tier_collection.extreme_first_key(item[0]))
    logger.debug("%d new games in tier %s during %d", len(ranked), tier, year)
    return [row for _, row in ranked]


def get_skipped_tier_count(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    tier_collection: TierCollection,
    tier: str,
    get_game_value: GameValueGetter,
    game_filter: GameFilter | None = None,
) -> int:
    """Count games that jumped clean over ``tier`` during ``year``.

    A skip means the game had not reached ``tier`` at the end of ``year - 1``
    and had already reached the next harder tier by the end of ``year``.
    The next tier always comes from the collection itself, so the terminal
    tier can never be skipped.
    """
    year = require_year(year, "get_skipped_tier_count")
    next_tier = tier_collection.next_tier(tier)
    if next_tier is None:
        return 0

    current_snapshots = aggregate(plays, year)
    previous_snapshots = aggregate(plays, year - 1)

    skipped = 0
    for game, _, value in _game_values(games, current_snapshots, metric, get_game_value, game_filter):
        if not tier_collection.is_value_at_or_beyond_tier(value, next_tier):
            continue

        previous_value = get_game_value(game, previous_snapshots.get(game.id), metric)
        if previous_value is None or not tier_collection.is_value_at_or_beyond_tier(previous_value, tier):
            skipped += 1

    logger.debug("%d games skipped tier %s during %d", skipped, tier, year)
    return skipped
