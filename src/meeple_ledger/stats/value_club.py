"""Value clubs: what each hour, session or play of an owned game cost.

Value clubs are a descending tier collection over cost per metric unit,
so a lower cost is a harder (better) club. Only owned base games with a
known price paid and at least some play can be rated.
"""

from collections.abc import Mapping, Sequence

from meeple_ledger.models import (
    Game,
    Metric,
    MetricSnapshot,
    Play,
    ValueClubCandidate,
    ValueClubGame,
)
from meeple_ledger.stats import tier_engine
from meeple_ledger.stats.aggregate import aggregate, metric_delta, metric_selector
from meeple_ledger.stats.tiers import Direction, TierCollection, create_tier_collection

VALUE_CLUB_THRESHOLDS = {
    "FIVE_DOLLAR": 5,
    "TWO_FIFTY": 2.5,
    "ONE_DOLLAR": 1,
    "FIFTY_CENTS": 0.5,
}


def cost_club_collection(thresholds: Mapping[str, float] | None = None) -> TierCollection:
    """Build the value club ladder (defaults to $5/$2.50/$1/$0.50)."""
    return create_tier_collection(thresholds or VALUE_CLUB_THRESHOLDS, Direction.DESCENDING)


# =============================================================================
# Per-game Values
# =============================================================================


def is_game_owned(game: Game) -> bool:
    """Check if any copy of the game is currently owned."""
    return bool(game.owned_copies)


def get_game_price_paid(game: Game) -> float | None:
    """Total paid for the owned copies, or None when no price was recorded."""
    prices = [copy.price_paid for copy in game.owned_copies if copy.price_paid is not None]
    if not prices:
        return None
    return sum(prices)


def value_club_filter(game: Game) -> bool:
    """Only owned base games take part in value clubs."""
    return game.is_base_game and is_game_owned(game)


def value_club_value(game: Game, snapshot: MetricSnapshot | None, metric: Metric) -> float | None:
    """Cost per metric unit, or None when it cannot be computed.

    Capped at the price paid so that less than one unit played (e.g. half an
    hour) never makes a game look more expensive than it was.
    """
    price_paid = get_game_price_paid(game)
    if price_paid is None or snapshot is None:
        return None

    metric_value = metric_selector(snapshot, metric)
    if metric_value == 0:
        return None
    return min(price_paid / metric_value, price_paid)


def _club_row(game: Game, snapshot: MetricSnapshot, cost_per_metric: float, metric: Metric) -> ValueClubGame:
    return ValueClubGame(
        game=game,
        metric_value=metric_selector(snapshot, metric),
        cost_per_metric=cost_per_metric,
        price_paid=get_game_price_paid(game),
    )


def _new_club_row(
    game: Game,
    snapshot: MetricSnapshot,
    cost_per_metric: float,
    this_year_metric_value: float,
    metric: Metric,
) -> ValueClubGame:
    row = _club_row(game, snapshot, cost_per_metric, metric)
    return row.model_copy(update={"this_year_metric_value": this_year_metric_value})


# =============================================================================
# Club Queries
# =============================================================================


def get_value_club_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    clubs: TierCollection,
    tier: str,
) -> list[ValueClubGame]:
    """Games inside a club's cost range through ``year``, cheapest first."""
    return tier_engine.get_games_in_tier(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=clubs,
        tier=tier,
        get_game_value=value_club_value,
        game_filter=value_club_filter,
        get_game_details=_club_row,
    )


def count_value_club_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int | None,
    metric: Metric,
    clubs: TierCollection,
    tier: str,
) -> int:
    return tier_engine.count_games_in_tier(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=clubs,
        tier=tier,
        get_game_value=value_club_value,
        game_filter=value_club_filter,
    )


def calculate_value_club_increase(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    clubs: TierCollection,
    tier: str,
) -> int:
    return tier_engine.calculate_tier_increase(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=clubs,
        tier=tier,
        get_game_value=value_club_value,
        game_filter=value_club_filter,
    )


def get_new_value_club_games(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    clubs: TierCollection,
    tier: str,
) -> list[ValueClubGame]:
    """Games that joined a club during ``year``, cheapest first.

    Rows carry ``this_year_metric_value``: how much was played during ``year``.
    """
    return tier_engine.get_new_tier_games(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=clubs,
        tier=tier,
        get_game_value=value_club_value,
        game_filter=value_club_filter,
        get_this_year_value=metric_delta,
        get_game_details=_new_club_row,
    )


def get_skipped_value_club_count(
    games: Sequence[Game],
    plays: Sequence[Play],
    *,
    year: int,
    metric: Metric,
    clubs: TierCollection,
    tier: str,
) -> int:
    """Games that went from outside ``tier`` straight into a cheaper club in one year."""
    return tier_engine.get_skipped_tier_count(
        games,
        plays,
        year=year,
        metric=metric,
        tier_collection=clubs,
        tier=tier,
        get_game_value=value_club_value,
        game_filter=value_club_filter,
    )


def get_games_approaching_value_club(
    games: Sequence[Game],
    plays: Sequence[Play],
    metric: Metric,
    clubs: TierCollection,
    tier: str,
    top_n: int,
    year: int | None = None,
) -> list[ValueClubCandidate]:
    """Rated games not yet at or beyond ``tier``, closest to joining first.

    Args:
        top_n: Maximum number of candidates to return.
        year: Cutoff year (inclusive), or None for all time.

    Returns:
        Candidates with ``additional_needed``: how much more of ``metric``
        brings the cost per unit down to the club threshold.
    """
    threshold = clubs[tier]
    snapshots = aggregate(plays, year)

    candidates = []
    for game in games:
        if not value_club_filter(game):
            continue
        snapshot = snapshots.get(game.id)
        cost_per_metric = value_club_value(game, snapshot, metric)
        if cost_per_metric is None or clubs.is_value_at_or_beyond_tier(cost_per_metric, tier):
            continue

        price_paid = get_game_price_paid(game)
        metric_value = metric_selector(snapshot, metric)
        candidates.append(
            ValueClubCandidate(
                game=game,
                metric_value=metric_value,
                cost_per_metric=cost_per_metric,
                price_paid=price_paid,
                additional_needed=price_paid / threshold - metric_value,
            )
        )

    candidates.sort(key=lambda candidate: candidate.additional_needed)
    return candidates[:top_n]
