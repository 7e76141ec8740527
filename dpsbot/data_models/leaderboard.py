"""
Leaderboard data models.

Immutable data transfer objects passed between the ranking utilities,
services, views and cogs.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from dpsbot.utils.magnitude import MagnitudeValue


@dataclass(frozen=True)
class RankedEntry:
    """Single leaderboard row."""
    position: int
    user_id: int
    value: MagnitudeValue


@dataclass(frozen=True)
class RoleDelta:
    """Role changes needed to match the current ranking."""
    to_grant: List[Tuple[int, int]] = field(default_factory=list)
    to_revoke: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_grant and not self.to_revoke


@dataclass(frozen=True)
class LeaderboardPage:
    """Paginated leaderboard data."""
    entries: List[RankedEntry]
    current_page: int
    total_pages: int
    total_players: int
