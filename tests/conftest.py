"""Shared record builders."""

from datetime import date, timedelta

import pytest

from meeple_ledger.models import Game, GameCopy, Play
from meeple_ledger.stats.milestones import milestone_collection
from meeple_ledger.stats.value_club import cost_club_collection


@pytest.fixture
def make_game():
    def _make_game(game_id: int, price: float | None = None, owned: bool = True, **kwargs) -> Game:
        copies = (GameCopy(status_owned=owned, price_paid=price),)
        return Game(id=game_id, name=f"Game {game_id}", copies=copies, **kwargs)

    return _make_game


@pytest.fixture
def make_plays():
    def _make_plays(
        game_id: int,
        year: int,
        count: int,
        duration_min: float = 60,
        same_day: bool = False,
        start_day: int = 0,
    ) -> list[Play]:
        """``count`` plays in ``year``, one per day unless ``same_day``."""
        first = date(year, 1, 1) + timedelta(days=start_day)
        return [
            Play(
                game_id=game_id,
                date=first if same_day else first + timedelta(days=i),
                duration_min=duration_min,
            )
            for i in range(count)
        ]

    return _make_plays


@pytest.fixture
def milestones():
    return milestone_collection()


@pytest.fixture
def clubs():
    return cost_club_collection()
