"""Replay the play log into per-game cumulative aggregates.

Every engine in :mod:`meeple_ledger.stats` goes through :func:`aggregate`,
so a query for cutoff year Y always equals a from-scratch replay of the
plays dated in or before Y. Cost is O(plays) per call; nothing is cached.
"""

import logging
from collections.abc import Iterable

from meeple_ledger.models import Game, Metric, MetricSnapshot, Play

logger = logging.getLogger(__name__)


def is_play_in_year(play: Play, year: int | None) -> bool:
    """Check if a play happened in ``year`` (always true when year is None)."""
    if year is None:
        return True
    return play.year == year


def is_play_in_or_before_year(play: Play, year: int | None) -> bool:
    """Check if a play happened in or before ``year`` (always true when year is None)."""
    if year is None:
        return True
    return play.year <= year


def filter_plays_by_year(plays: Iterable[Play], year: int | None) -> list[Play]:
    """Keep only the plays logged during ``year``; None keeps everything."""
    return [play for play in plays if is_play_in_year(play, year)]


def aggregate(plays: Iterable[Play], cutoff_year: int | None = None) -> dict[int, MetricSnapshot]:
    """Build per-game snapshots from every play dated in or before the cutoff.

    Args:
        plays: The play log.
        cutoff_year: Last year to include (inclusive). None means all time.

    Returns:
        Map of game id to its snapshot. Games never played in the window
        have no entry at all, which is not the same as a zero snapshot.
    """
    snapshots: dict[int, MetricSnapshot] = {}
    for play in plays:
        if not is_play_in_or_before_year(play, cutoff_year):
            continue

        snapshot = snapshots.get(play.game_id)
        if snapshot is None:
            snapshot = snapshots[play.game_id] = MetricSnapshot()

        snapshot.play_count += 1
        snapshot.total_minutes += play.duration_min or 0
        snapshot.unique_dates.add(play.date)

    logger.debug("Aggregated %d games through %s", len(snapshots), cutoff_year or "all time")
    return snapshots


def metric_selector(snapshot: MetricSnapshot, metric: Metric) -> float:
    """Resolve a snapshot to the scalar for ``metric``."""
    if metric == Metric.SESSIONS:
        return snapshot.sessions
    if metric == Metric.PLAYS:
        return snapshot.play_count
    if metric == Metric.HOURS:
        return snapshot.hours
    raise ValueError(f"Unknown metric: {metric!r}")


def metric_delta(
    game: Game,
    current: MetricSnapshot | None,
    previous: MetricSnapshot | None,
    metric: Metric,
) -> float:
    """How much of ``metric`` was added between two cumulative snapshots.

    Used as the default "this year's value" for new tier entrants. A missing
    snapshot on either side counts as nothing played.
    """
    current_value = metric_selector(current, metric) if current is not None else 0
    previous_value = metric_selector(previous, metric) if previous is not None else 0
    return current_value - previous_value
