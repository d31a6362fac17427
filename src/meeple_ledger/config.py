"""Settings loaded from the environment.

Set these in the environment or in a ``.env`` file (current directory or
``~/.meeple_ledger/.env``):

    MEEPLE_MILESTONES="5,10,25,100"
    MEEPLE_COST_CLUBS="5,2.5,1,0.5"
    MEEPLE_DEFAULT_METRIC="hours"
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from meeple_ledger.models import Metric
from meeple_ledger.stats.milestones import MILESTONE_THRESHOLDS, milestone_collection
from meeple_ledger.stats.tiers import TierCollection
from meeple_ledger.stats.value_club import VALUE_CLUB_THRESHOLDS, cost_club_collection

DEFAULT_CONFIG_DIR = Path.home() / ".meeple_ledger"


def _parse_thresholds(env_var: str, names: list[str]) -> dict[str, float] | None:
    """Read a comma-separated threshold list, pairing values with tier names in order."""
    raw = os.getenv(env_var)
    if not raw:
        return None

    try:
        values = [float(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValueError(f"{env_var} must be a comma-separated list of numbers, got {raw!r}") from None

    if len(values) != len(names):
        raise ValueError(f"{env_var} needs exactly {len(names)} thresholds ({', '.join(names)}), got {raw!r}")
    return dict(zip(names, values))


class Settings(BaseModel):
    """Tier thresholds and defaults for stats queries."""

    milestone_thresholds: dict[str, float] = dict(MILESTONE_THRESHOLDS)
    cost_club_thresholds: dict[str, float] = dict(VALUE_CLUB_THRESHOLDS)
    default_metric: Metric = Metric.HOURS

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> "Settings":
        """Load settings, reading ``.env`` files first.

        Args:
            env_file: Explicit ``.env`` to load instead of the default locations.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv(Path.cwd() / ".env")
            load_dotenv(DEFAULT_CONFIG_DIR / ".env")

        settings = cls()
        milestones = _parse_thresholds("MEEPLE_MILESTONES", list(MILESTONE_THRESHOLDS))
        if milestones is not None:
            settings.milestone_thresholds = milestones

        cost_clubs = _parse_thresholds("MEEPLE_COST_CLUBS", list(VALUE_CLUB_THRESHOLDS))
        if cost_clubs is not None:
            settings.cost_club_thresholds = cost_clubs

        metric = os.getenv("MEEPLE_DEFAULT_METRIC")
        if metric:
            try:
                settings.default_metric = Metric(metric.strip().lower())
            except ValueError:
                raise ValueError(
                    f"MEEPLE_DEFAULT_METRIC must be one of {[m.value for m in Metric]}, got {metric!r}"
                ) from None

        # Thresholds pair with tier names by position; out-of-order lists fail here.
        settings.milestone_collection()
        settings.cost_club_collection()
        return settings

    def milestone_collection(self) -> TierCollection:
        return milestone_collection(self.milestone_thresholds)

    def cost_club_collection(self) -> TierCollection:
        return cost_club_collection(self.cost_club_thresholds)
