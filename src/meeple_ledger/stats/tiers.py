"""Named threshold ladders for classifying games into tiers.

A collection orders its thresholds from the entry tier (easiest) to the
terminal tier (hardest). Two directions exist:

- ASCENDING: more is better, e.g. play-count milestones 5, 10, 25, 100.
  A tier covers ``[threshold, next_threshold)``.
- DESCENDING: less is better, e.g. cost-per-play clubs 5, 2.5, 1, 0.5.
  A tier covers ``(next_threshold, threshold]``.

The terminal tier's range is open-ended.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, NamedTuple


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class Direction(str, Enum):
    """Which way a tier collection gets harder."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


class TierCollectionError(ValueError):
    """A tier collection was defined with an invalid threshold ladder."""

    pass


class UnknownTierError(KeyError):
    """A tier name that is not part of the collection."""

    pass


@dataclass(frozen=True)
class Tier:
    """A named threshold."""

    name: str
    threshold: float


class TierBounds(NamedTuple):
    threshold: float
    next_threshold: float | None  # None at the terminal tier


@dataclass(frozen=True)
class TierCollection(ABC):
    """Ordered, immutable ladder of tiers sharing one direction.

    Subclasses decide what "at or beyond" means; everything else is derived
    from that comparison and the entry-to-terminal ordering of ``tiers``.
    """

    tiers: tuple[Tier, ...]

    direction: ClassVar[Direction]

    def __post_init__(self):
        object.__setattr__(self, "tiers", tuple(self.tiers))
        if not self.tiers:
            raise TierCollectionError("A tier collection needs at least one threshold")

        names = [tier.name for tier in self.tiers]
        if len(set(names)) != len(names):
            raise TierCollectionError(f"Duplicate tier names: {names}")

        for tier in self.tiers:
            if not _is_number(tier.threshold):
                raise TierCollectionError(
                    f"Tier {tier.name} has a non-numeric threshold: {tier.threshold!r}"
                )

        for easier, harder in zip(self.tiers, self.tiers[1:]):
            if not self.is_harder(harder.threshold, easier.threshold):
                raise TierCollectionError(
                    f"Thresholds must be strictly {self.direction.value}: "
                    f"{easier.name}={easier.threshold} is followed by "
                    f"{harder.name}={harder.threshold}"
                )

    # -------------------------------------------------------------------------
    # Direction strategy
    # -------------------------------------------------------------------------

    @abstractmethod
    def reaches(self, value: float, threshold: float) -> bool:
        """True when ``value`` is at or beyond ``threshold``."""

    @abstractmethod
    def is_harder(self, value: float, other: float) -> bool:
        """True when ``value`` lies strictly beyond ``other``."""

    @abstractmethod
    def extreme_first_key(self, value: float) -> float:
        """Sort key that puts the most extreme qualifying value first."""

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Tier]:
        return iter(self.tiers)

    def __len__(self) -> int:
        return len(self.tiers)

    def __contains__(self, name: object) -> bool:
        return any(tier.name == name for tier in self.tiers)

    def __getitem__(self, name: str) -> float:
        return self.tiers[self._index(name)].threshold

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(tier.name for tier in self.tiers)

    @property
    def values(self) -> tuple[float, ...]:
        """Thresholds from entry to terminal tier."""
        return tuple(tier.threshold for tier in self.tiers)

    @property
    def terminal_tier(self) -> str:
        return self.tiers[-1].name

    def _index(self, name: str) -> int:
        for i, tier in enumerate(self.tiers):
            if tier.name == name:
                return i
        raise UnknownTierError(name)

    def next_tier(self, name: str) -> str | None:
        """Name of the next harder tier, or None at the terminal tier."""
        i = self._index(name) + 1
        return self.tiers[i].name if i < len(self.tiers) else None

    def get_threshold(self, name: str) -> TierBounds:
        i = self._index(name)
        next_threshold = self.tiers[i + 1].threshold if i + 1 < len(self.tiers) else None
        return TierBounds(self.tiers[i].threshold, next_threshold)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def is_value_in_tier(self, value: float, name: str) -> bool:
        """Check if ``value`` falls inside the tier's own half-open range."""
        threshold, next_threshold = self.get_threshold(name)
        if not self.reaches(value, threshold):
            return False
        return next_threshold is None or not self.reaches(value, next_threshold)

    def is_value_at_or_beyond_tier(self, value: float, name: str) -> bool:
        """Cumulative membership: the tier or anything harder."""
        return self.reaches(value, self[name])

    def get_tier_for_value(self, value: float) -> str | None:
        for tier in self.tiers:
            if self.is_value_in_tier(value, tier.name):
                return tier.name
        return None

    def get_next_target(self, current_value: float) -> float | None:
        """Closest threshold still beyond ``current_value``."""
        for tier in self.tiers:
            if self.is_harder(tier.threshold, current_value):
                return tier.threshold
        return None


@dataclass(frozen=True)
class AscendingTierCollection(TierCollection):
    """Tiers where a higher value is a harder tier."""

    direction: ClassVar[Direction] = Direction.ASCENDING

    def reaches(self, value: float, threshold: float) -> bool:
        return value >= threshold

    def is_harder(self, value: float, other: float) -> bool:
        return value > other

    def extreme_first_key(self, value: float) -> float:
        return -value


@dataclass(frozen=True)
class DescendingTierCollection(TierCollection):
    """Tiers where a lower value is a harder tier."""

    direction: ClassVar[Direction] = Direction.DESCENDING

    def reaches(self, value: float, threshold: float) -> bool:
        return value <= threshold

    def is_harder(self, value: float, other: float) -> bool:
        return value < other

    def extreme_first_key(self, value: float) -> float:
        return value


_COLLECTION_TYPES: dict[Direction, type[TierCollection]] = {
    Direction.ASCENDING: AscendingTierCollection,
    Direction.DESCENDING: DescendingTierCollection,
}


def create_tier_collection(
    thresholds: Mapping[str, float], direction: Direction | str
) -> TierCollection:
    """Build a tier collection from ``{name: threshold}``.

    The mapping's order is the tier order, from entry to terminal tier.

    Raises:
        TierCollectionError: If the mapping is empty, holds non-finite
            thresholds, is not strictly monotonic for ``direction``, or the
            direction is unknown.
    """
    try:
        direction = Direction(direction)
    except ValueError:
        raise TierCollectionError(f"Unknown tier direction: {direction!r}") from None

    for name, value in thresholds.items():
        if not _is_number(value):
            raise TierCollectionError(f"Tier {name} has a non-numeric threshold: {value!r}")

    collection_type = _COLLECTION_TYPES[direction]
    return collection_type(tuple(Tier(name, value) for name, value in thresholds.items()))
