"""Collection statistics: tiers, milestones, value clubs and h-indexes."""

from meeple_ledger.stats.aggregate import (
    aggregate,
    filter_plays_by_year,
    is_play_in_or_before_year,
    is_play_in_year,
    metric_delta,
    metric_selector,
)
from meeple_ledger.stats.h_index import (
    calculate_h_index,
    calculate_h_index_from_sorted_values,
    calculate_h_index_increase,
    calculate_h_index_through_year,
    get_h_index_breakdown,
    get_new_h_index_games,
    get_next_h_index_candidates,
)
from meeple_ledger.stats.tier_engine import (
    calculate_tier_increase,
    count_games_in_tier,
    get_games_in_tier,
    get_new_tier_games,
    get_skipped_tier_count,
)
from meeple_ledger.stats.tiers import (
    AscendingTierCollection,
    DescendingTierCollection,
    Direction,
    Tier,
    TierBounds,
    TierCollection,
    TierCollectionError,
    UnknownTierError,
    create_tier_collection,
)

__all__ = [
    # Aggregation
    "aggregate",
    "filter_plays_by_year",
    "is_play_in_or_before_year",
    "is_play_in_year",
    "metric_delta",
    "metric_selector",
    # Tier collections
    "AscendingTierCollection",
    "DescendingTierCollection",
    "Direction",
    "Tier",
    "TierBounds",
    "TierCollection",
    "TierCollectionError",
    "UnknownTierError",
    "create_tier_collection",
    # Tier engine
    "calculate_tier_increase",
    "count_games_in_tier",
    "get_games_in_tier",
    "get_new_tier_games",
    "get_skipped_tier_count",
    # H-index
    "calculate_h_index",
    "calculate_h_index_from_sorted_values",
    "calculate_h_index_increase",
    "calculate_h_index_through_year",
    "get_h_index_breakdown",
    "get_new_h_index_games",
    "get_next_h_index_candidates",
]
