"""
Sword rank ladder and crafting calculator.

Three swords of one rank combine into one sword of the next rank. All
conversions work on whole swords: an upward conversion that would leave a
fraction at any step is rejected.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from dpsbot.constants import SwordConstants, DiscordLimits
from dpsbot.utils.dps_exceptions import InvalidTierError, UnconvertibleError, MalformedInputError


# Append new ranks at the end
SWORD_RANKS = [
    "e", "d", "c", "b", "a", "s", "ss", "g", "n", "n+",
    "m", "m+", "gm", "gm+", "ugm", "ugm+", "hgm", "hgm+", "r", "r+",
    "mr", "mr+", "gr", "gr+", "ur", "ur+",
]


@dataclass(frozen=True)
class Shortage:
    """How many base-tier swords are still missing for a target."""
    needed: int
    required: int
    owned: int
    base_tier: str
    target_tier: str


class RankLadder:
    """Ordered tiers with a fixed promotion ratio."""

    def __init__(self, tiers: Sequence[str], ratio: int = SwordConstants.PROMOTION_RATIO):
        if not tiers:
            raise ValueError("Ladder must have at least one tier")
        if ratio < 2:
            raise ValueError("Promotion ratio must be at least 2")

        self._tiers: List[str] = []
        self._index: Dict[str, int] = {}
        for tier in tiers:
            key = tier.strip().lower()
            if not key:
                raise ValueError("Tier names must not be empty")
            if key in self._index:
                raise ValueError(f"Duplicate tier: {tier}")
            self._index[key] = len(self._tiers)
            self._tiers.append(key)
        self.ratio = ratio

    @property
    def tiers(self) -> List[str]:
        return list(self._tiers)

    @property
    def lowest(self) -> str:
        return self._tiers[0]

    def index(self, tier: str) -> int:
        """
        Position of a tier, lowest first.

        Raises:
            InvalidTierError: If the tier is not on the ladder
        """
        if not isinstance(tier, str):
            raise InvalidTierError(str(tier))
        position = self._index.get(tier.strip().lower())
        if position is None:
            raise InvalidTierError(tier)
        return position

    def convert(self, from_tier: str, to_tier: str, count: int) -> int:
        """
        Convert a number of swords of one tier into another tier.

        Args:
            from_tier: Tier the swords are in
            to_tier: Tier to express them in
            count: Number of swords (non-negative integer)

        Returns:
            Equivalent number of to_tier swords

        Raises:
            InvalidTierError: If either tier is unknown
            UnconvertibleError: If an upward conversion leaves a remainder at any step
            MalformedInputError: If count is not a non-negative integer
        """
        _check_count(count)
        from_index = self.index(from_tier)
        to_index = self.index(to_tier)

        if from_index == to_index:
            return count

        if from_index > to_index:
            # Breaking down is always exact
            return count * self.ratio ** (from_index - to_index)

        total = count
        for _ in range(to_index - from_index):
            if total % self.ratio != 0:
                raise UnconvertibleError(from_tier, to_tier, count)
            total //= self.ratio
        return total

    def total_needed(self, start_tier: str, target_tier: str) -> int:
        """
        Number of start_tier swords that make one target_tier sword.

        Raises:
            InvalidTierError: If a tier is unknown or start is not below target
        """
        start_index = self.index(start_tier)
        target_index = self.index(target_tier)
        if start_index >= target_index:
            raise InvalidTierError(
                target_tier,
                f"Target rank `{target_tier}` must be above starting rank `{start_tier}`."
            )
        return self.convert(target_tier, start_tier, 1)

    def shortage(self, target_tier: str, owned: Mapping[str, int], base_tier: str = SwordConstants.DEFAULT_BASE_TIER) -> Shortage:
        """
        Base-tier swords still missing to build one target_tier sword.

        Every owned entry is converted to base_tier. An entry below the base
        that does not divide evenly fails the whole call.

        Raises:
            InvalidTierError: If a tier is unknown or the target is not above the base
            UnconvertibleError: If an owned entry cannot be expressed in base_tier
        """
        required = self.total_needed(base_tier, target_tier)

        owned_total = 0
        for tier, count in owned.items():
            owned_total += self.convert(tier, base_tier, count)

        return Shortage(
            needed=max(0, required - owned_total),
            required=required,
            owned=owned_total,
            base_tier=self._tiers[self.index(base_tier)],
            target_tier=self._tiers[self.index(target_tier)],
        )

    def breakdown(self, target_tier: str, owned: Mapping[str, int]) -> List[Tuple[str, int]]:
        """
        Tier-by-tier shortfall for one target_tier sword.

        Walks down from the target. Each step needs ``carry * ratio`` swords of
        the next lower tier; owned swords of that tier are subtracted and any
        positive remainder is both recorded and carried further down. The walk
        stops at the first tier whose requirement is already covered.

        Returns:
            List of (tier, missing count), highest tier first. Empty when the
            target is already owned.

        Raises:
            InvalidTierError: If the target or an owned tier is unknown
        """
        target_index = self.index(target_tier)
        counts = self._normalize(owned)

        carry = 1 - counts.get(target_index, 0)
        if carry <= 0:
            return []

        shortfall = []
        for index in range(target_index - 1, -1, -1):
            remaining = carry * self.ratio - counts.get(index, 0)
            if remaining <= 0:
                break
            shortfall.append((self._tiers[index], remaining))
            carry = remaining
        return shortfall

    def _normalize(self, owned: Mapping[str, int]) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for tier, count in owned.items():
            _check_count(count)
            index = self.index(tier)
            counts[index] = counts.get(index, 0) + count
        return counts

    def search(self, current: str, limit: int = DiscordLimits.AUTOCOMPLETE_LIMIT) -> List[str]:
        """Tiers for autocomplete, prefix matches first."""
        needle = (current or "").strip().lower()
        if not needle:
            return self._tiers[:limit]
        prefix = [t for t in self._tiers if t.startswith(needle)]
        contains = [t for t in self._tiers if needle in t and t not in prefix]
        return (prefix + contains)[:limit]

    def __contains__(self, tier) -> bool:
        return isinstance(tier, str) and tier.strip().lower() in self._index

    def __len__(self) -> int:
        return len(self._tiers)


def _check_count(count) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise MalformedInputError(str(count), "Sword counts must be whole numbers of 0 or more.")


DEFAULT_LADDER = RankLadder(SWORD_RANKS)
