"""Tier engine tests."""

import pytest

from meeple_ledger.models import Metric, NewTierGame, TierMembership
from meeple_ledger.stats.milestones import milestone_value
from meeple_ledger.stats.tier_engine import (
    calculate_tier_increase,
    count_games_in_tier,
    get_games_in_tier,
    get_new_tier_games,
    get_skipped_tier_count,
)
from meeple_ledger.stats.tiers import Direction, create_tier_collection


@pytest.fixture
def query(milestones):
    """Keyword arguments shared by milestone-style queries over play counts."""
    return dict(
        metric=Metric.PLAYS,
        tier_collection=milestones,
        get_game_value=milestone_value,
    )


class TestCountGamesInTier:
    """Test tier membership counts."""

    def test_counts_only_games_inside_range(self, make_game, make_plays, query):
        """Games below or beyond the tier's range are not counted."""
        games = [make_game(1), make_game(2), make_game(3)]
        plays = make_plays(1, 2023, 4) + make_plays(2, 2023, 7) + make_plays(3, 2023, 12)
        assert count_games_in_tier(games, plays, year=2023, tier="FIVES", **query) == 1
        assert count_games_in_tier(games, plays, year=2023, tier="DIMES", **query) == 1

    def test_year_is_cumulative(self, make_game, make_plays, query):
        """A cutoff year counts every play up to its end."""
        games = [make_game(1)]
        plays = make_plays(1, 2021, 3) + make_plays(1, 2022, 3) + make_plays(1, 2024, 10)
        assert count_games_in_tier(games, plays, year=2021, tier="FIVES", **query) == 0
        assert count_games_in_tier(games, plays, year=2022, tier="FIVES", **query) == 1
        assert count_games_in_tier(games, plays, year=None, tier="DIMES", **query) == 1

    def test_none_value_is_excluded_not_zero(self, make_game, make_plays):
        """A game without a value is left out instead of being rated zero."""
        collection = create_tier_collection({"ZERO": 0, "ONE": 1}, Direction.ASCENDING)
        games = [make_game(1), make_game(2)]
        plays = make_plays(1, 2023, 1, duration_min=0)

        kwargs = dict(year=None, metric=Metric.HOURS, tier_collection=collection, tier="ZERO")
        assert count_games_in_tier(games, plays, get_game_value=milestone_value, **kwargs) == 1

        def zero_when_unplayed(game, snapshot, metric):
            return 0 if snapshot is None else milestone_value(game, snapshot, metric)

        assert count_games_in_tier(games, plays, get_game_value=zero_when_unplayed, **kwargs) == 2

    def test_game_filter(self, make_game, make_plays, query):
        """Filtered-out games are never counted."""
        games = [make_game(1), make_game(2, is_base_game=False, is_expansion=True)]
        plays = make_plays(1, 2023, 5) + make_plays(2, 2023, 5)
        count = count_games_in_tier(
            games, plays, year=2023, tier="FIVES", game_filter=lambda g: g.is_base_game, **query
        )
        assert count == 1

    def test_plays_for_unknown_games_ignored(self, make_game, make_plays, query):
        """Only games in the collection are classified."""
        plays = make_plays(99, 2023, 5)
        assert count_games_in_tier([make_game(1)], plays, year=2023, tier="FIVES", **query) == 0

    def test_idempotent(self, make_game, make_plays, query):
        """Identical inputs give identical counts."""
        games = [make_game(i) for i in range(1, 6)]
        plays = [p for i in range(1, 6) for p in make_plays(i, 2023, i * 3)]
        first = count_games_in_tier(games, plays, year=2023, tier="FIVES", **query)
        second = count_games_in_tier(games, plays, year=2023, tier="FIVES", **query)
        assert first == second == 2


class TestGetGamesInTier:
    """Test tier membership rows."""

    def test_rows_sorted_highest_first_for_ascending(self, make_game, make_plays, query):
        """Ascending tiers list the biggest value first."""
        games = [make_game(1), make_game(2), make_game(3)]
        plays = make_plays(1, 2023, 5) + make_plays(2, 2023, 9) + make_plays(3, 2023, 7)
        rows = get_games_in_tier(games, plays, year=2023, tier="FIVES", **query)
        assert [row.game.id for row in rows] == [2, 3, 1]
        assert rows[0] == TierMembership(game=games[1], metric_value=9, tier="FIVES")

    def test_rows_sorted_lowest_first_for_descending(self, make_game, make_plays):
        """Descending tiers list the smallest value first."""
        collection = create_tier_collection({"LOW": 10, "LOWER": 1}, Direction.DESCENDING)
        games = [make_game(1), make_game(2)]
        plays = make_plays(1, 2023, 2) + make_plays(2, 2023, 8)
        rows = get_games_in_tier(
            games,
            plays,
            year=2023,
            metric=Metric.PLAYS,
            tier_collection=collection,
            tier="LOW",
            get_game_value=milestone_value,
        )
        assert [row.metric_value for row in rows] == [2, 8]

    def test_custom_row_builder(self, make_game, make_plays, query):
        """Callers can shape the rows."""
        games = [make_game(1)]
        rows = get_games_in_tier(
            games,
            make_plays(1, 2023, 6),
            year=2023,
            tier="FIVES",
            get_game_details=lambda game, snapshot, value, metric: (game.id, snapshot.sessions, value),
            **query,
        )
        assert rows == [(1, 6, 6)]


class TestCalculateTierIncrease:
    """Test year-over-year membership deltas."""

    def test_new_member(self, make_game, make_plays, query):
        """Entering a tier counts as +1."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 2) + make_plays(1, 2023, 3)
        assert calculate_tier_increase(games, plays, year=2023, tier="FIVES", **query) == 1

    def test_advancing_past_tier_is_negative(self, make_game, make_plays, query):
        """Moving on to the next tier leaves the old one."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 8) + make_plays(1, 2023, 4)
        assert calculate_tier_increase(games, plays, year=2023, tier="FIVES", **query) == -1
        assert calculate_tier_increase(games, plays, year=2023, tier="DIMES", **query) == 1

    def test_year_required(self, make_game, query):
        """A missing year is rejected."""
        with pytest.raises(ValueError):
            calculate_tier_increase([make_game(1)], [], year=None, tier="FIVES", **query)


class TestGetNewTierGames:
    """Test new tier entrant detection."""

    def test_normal_progression(self, make_game, make_plays, query):
        """Reaching exactly five plays from two reports three this year."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 2) + make_plays(1, 2023, 3)
        new = get_new_tier_games(games, plays, year=2023, tier="FIVES", **query)
        assert new == [NewTierGame(game=games[0], value=5, this_year_value=3)]

    def test_existing_members_not_new(self, make_game, make_plays, query):
        """A game already in the tier last year is not new."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 5) + make_plays(1, 2023, 2)
        assert get_new_tier_games(games, plays, year=2023, tier="FIVES", **query) == []

    def test_previously_beyond_tier_not_new(self, make_game, make_plays, milestones):
        """A game that was at or beyond the tier last year is not new when it falls back into it."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 2) + make_plays(1, 2023, 1)

        def shrinking(game, snapshot, metric):
            return None if snapshot is None else 20 - 4 * snapshot.play_count

        new = get_new_tier_games(
            games,
            plays,
            year=2023,
            metric=Metric.PLAYS,
            tier_collection=milestones,
            tier="FIVES",
            get_game_value=shrinking,
        )
        assert new == []

    def test_first_ever_plays(self, make_game, make_plays, query):
        """A game first played this year counts everything as this year's."""
        games = [make_game(1)]
        new = get_new_tier_games(games, make_plays(1, 2023, 6), year=2023, tier="FIVES", **query)
        assert new[0].this_year_value == 6

    def test_sorted_biggest_first(self, make_game, make_plays, query):
        """Ascending entrants are listed by value, biggest first."""
        games = [make_game(1), make_game(2), make_game(3)]
        plays = make_plays(1, 2023, 5) + make_plays(2, 2023, 9) + make_plays(3, 2023, 7)
        new = get_new_tier_games(games, plays, year=2023, tier="FIVES", **query)
        assert [row.value for row in new] == [9, 7, 5]

    def test_custom_this_year_value(self, make_game, make_plays, query):
        """Callers can supply their own this-year value."""
        games = [make_game(1)]
        new = get_new_tier_games(
            games,
            make_plays(1, 2023, 5),
            year=2023,
            tier="FIVES",
            get_this_year_value=lambda game, current, previous, metric: -1,
            **query,
        )
        assert new[0].this_year_value == -1

    def test_year_required(self, make_game, query):
        """A missing year is rejected."""
        with pytest.raises(ValueError):
            get_new_tier_games([make_game(1)], [], year=None, tier="FIVES", **query)


class TestGetSkippedTierCount:
    """Test tier skip detection."""

    def test_milestone_skip(self, make_game, make_plays, query):
        """Two plays, then ten more in one year, jumps straight over the fives."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 2) + make_plays(1, 2023, 10)
        assert get_skipped_tier_count(games, plays, year=2023, tier="FIVES", **query) == 1

    def test_normal_progression_is_not_a_skip(self, make_game, make_plays, query):
        """Stopping inside the tier's range is not a skip."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 2) + make_plays(1, 2023, 3)
        assert get_skipped_tier_count(games, plays, year=2023, tier="FIVES", **query) == 0

    def test_already_in_tier_is_not_a_skip(self, make_game, make_plays, query):
        """Advancing from inside the tier to the next one is not a skip."""
        games = [make_game(1)]
        plays = make_plays(1, 2022, 6) + make_plays(1, 2023, 10)
        assert get_skipped_tier_count(games, plays, year=2023, tier="FIVES", **query) == 0

    def test_never_played_before(self, make_game, make_plays, query):
        """A game with no plays before the year can still skip."""
        games = [make_game(1)]
        plays = make_plays(1, 2023, 30)
        assert get_skipped_tier_count(games, plays, year=2023, tier="FIVES", **query) == 1
        assert get_skipped_tier_count(games, plays, year=2023, tier="DIMES", **query) == 1
        assert get_skipped_tier_count(games, plays, year=2023, tier="QUARTERS", **query) == 0

    def test_terminal_tier_never_skipped(self, make_game, make_plays, query):
        """Nothing lies beyond the terminal tier, so it cannot be skipped."""
        games = [make_game(1)]
        plays = make_plays(1, 2023, 150)
        assert get_skipped_tier_count(games, plays, year=2023, tier="CENTURIES", **query) == 0

    def test_year_required(self, make_game, query):
        """A missing year is rejected."""
        with pytest.raises(ValueError):
            get_skipped_tier_count([make_game(1)], [], year=None, tier="FIVES", **query)
