"""H-index over the collection: the largest h such that h games each have at least h of a metric.

Three flavours, one per :class:`Metric`: plays (the traditional h-index),
sessions (distinct days) and hours.
"""

import logging
from collections.abc import Iterable, Sequence

from meeple_ledger.models import Game, HIndexCandidates, HIndexEntry, Metric, MetricSnapshot, NewHIndexGame, Play
from meeple_ledger.stats.aggregate import aggregate, filter_plays_by_year, metric_delta, metric_selector
from meeple_ledger.stats.tier_engine import require_year

logger = logging.getLogger(__name__)


def calculate_h_index_from_sorted_values(sorted_values: Iterable[float]) -> int:
    """H-index of values already sorted highest first."""
    h_index = 0
    for i, value in enumerate(sorted_values):
        if value >= i + 1:
            h_index = i + 1
        else:
            break
    return h_index


def _h_index(snapshots: dict[int, MetricSnapshot], metric: Metric) -> int:
    values = sorted((metric_selector(s, metric) for s in snapshots.values()), reverse=True)
    return calculate_h_index_from_sorted_values(values)


def calculate_h_index(plays: Sequence[Play], metric: Metric, year: int | None = None) -> int:
    """H-index of the plays logged during ``year`` only, or of all plays when None."""
    return _h_index(aggregate(filter_plays_by_year(plays, year)), metric)


def calculate_h_index_through_year(plays: Sequence[Play], year: int, metric: Metric) -> int:
    """All-time h-index as it stood at the end of ``year``."""
    return _h_index(aggregate(plays, year), metric)


def calculate_h_index_increase(plays: Sequence[Play], year: int, metric: Metric) -> int:
    """How much the all-time h-index moved during ``year`` (may be zero)."""
    year = require_year(year, "calculate_h_index_increase")
    current = calculate_h_index_through_year(plays, year, metric)
    previous = calculate_h_index_through_year(plays, year - 1, metric)
    return current - previous


# =============================================================================
# Breakdowns
# =============================================================================


def _breakdown(
    games: Sequence[Game], snapshots: dict[int, MetricSnapshot], metric: Metric
) -> list[HIndexEntry]:
    """Rank played games by value and flag the ones holding up the h-index.

    The h-index itself counts every snapshot, so plays logged against a game
    missing from ``games`` still count towards h.
    """
    h_index = _h_index(snapshots, metric)
    played = [
        (game, metric_selector(snapshots[game.id], metric))
        for game in games
        if game.id in snapshots
    ]
    played.sort(key=lambda item: item[1], reverse=True)

    return [
        HIndexEntry(
            game=game,
            value=value,
            rank=rank,
            contributes=rank <= value and rank <= h_index,
        )
        for rank, (game, value) in enumerate(played, start=1)
    ]


def get_h_index_breakdown(
    games: Sequence[Game],
    plays: Sequence[Play],
    metric: Metric,
    year: int | None = None,
    through_year: bool = False,
) -> list[HIndexEntry]:
    """Every played game ranked by ``metric``, highest first.

    Args:
        year: Year to look at, or None for all time.
        through_year: If True, include every play up to the end of ``year``
            instead of only the plays logged during it.
    """
    if through_year:
        snapshots = aggregate(plays, year)
    else:
        snapshots = aggregate(filter_plays_by_year(plays, year))
    return _breakdown(games, snapshots, metric)


def get_new_h_index_games(
    games: Sequence[Game], plays: Sequence[Play], year: int, metric: Metric
) -> list[NewHIndexGame]:
    """Games counting towards the all-time h-index at the end of ``year`` but not a year earlier.

    Returns:
        Newcomers in ranking order, each with its cumulative value and what
        was added during ``year``.
    """
    year = require_year(year, "get_new_h_index_games")
    current_snapshots = aggregate(plays, year)
    previous_snapshots = aggregate(plays, year - 1)

    previous_contributors = {
        entry.game.id for entry in _breakdown(games, previous_snapshots, metric) if entry.contributes
    }

    newcomers = []
    for entry in _breakdown(games, current_snapshots, metric):
        if not entry.contributes or entry.game.id in previous_contributors:
            continue
        this_year_value = metric_delta(
            entry.game,
            current_snapshots.get(entry.game.id),
            previous_snapshots.get(entry.game.id),
            metric,
        )
        newcomers.append(NewHIndexGame(game=entry.game, value=entry.value, this_year_value=this_year_value))

    logger.debug("%d new %s h-index games during %d", len(newcomers), metric, year)
    return newcomers


def get_next_h_index_candidates(
    games: Sequence[Game],
    plays: Sequence[Play],
    metric: Metric,
    year: int | None = None,
) -> HIndexCandidates:
    """Games closest to lifting the h-index from h to h + 1.

    ``games_needed`` more games must reach h + 1. Candidates are the played
    games still below h + 1 whose value is at least that of the
    ``games_needed``-th best of them, so ties at the cut are all included.

    Args:
        year: Cutoff year (inclusive), or None for all time.
    """
    snapshots = aggregate(plays, year)
    h_index = _h_index(snapshots, metric)
    target = h_index + 1

    at_or_above = sum(1 for s in snapshots.values() if metric_selector(s, metric) >= target)
    games_needed = target - at_or_above

    below = [entry for entry in _breakdown(games, snapshots, metric) if 0 < entry.value < target]
    candidates = []
    if below:
        cutoff = below[min(games_needed, len(below)) - 1].value
        candidates = [entry for entry in below if entry.value >= cutoff]

    return HIndexCandidates(
        h_index=h_index,
        target=target,
        games_needed=games_needed,
        candidates=candidates,
    )
