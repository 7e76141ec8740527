"""
Leaderboard service.

Glues the record store to the pure ranking utilities: validates and stores
submissions, takes guild snapshots, and works out position-role changes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Set

from sqlalchemy.exc import IntegrityError

from dpsbot.config import Config
from dpsbot.data_models.leaderboard import RankedEntry, RoleDelta
from dpsbot.services.record_store import RecordStore
from dpsbot.utils.dps_exceptions import DatabaseError
from dpsbot.utils.magnitude import MagnitudeValue
from dpsbot.utils import ranking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    value: MagnitudeValue
    previous: Optional[MagnitudeValue]
    position: Optional[int]
    total_players: int


class LeaderboardService:
    """Score submission and ranking for one bot instance."""

    def __init__(self, store: RecordStore, max_retries: int = 3):
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        self.store = store
        self.max_retries = max_retries

    async def submit_score(self, guild_id: int, user_id: int, display_name: str, mantissa: float, unit: str) -> SubmissionResult:
        """
        Validate and store a member's DPS, replacing their previous value.

        Raises:
            InvalidUnitError: If the unit is not registered
            MalformedInputError: If the value is not a finite number
            DatabaseError: If the record could not be stored
        """
        value = MagnitudeValue.create(mantissa, unit, self.store.registry)

        for attempt in range(self.max_retries):
            try:
                previous = await self.store.set(guild_id, user_id, value, display_name)
                break
            except IntegrityError as e:
                if attempt == self.max_retries - 1:
                    logger.error(f"Score submission failed after {self.max_retries} attempts: {e}")
                    raise DatabaseError("score submission", str(e))
                logger.warning(f"Score submission retry {attempt + 1} for user {user_id} in guild {guild_id}")
                await asyncio.sleep(min(0.1 * (2 ** attempt), 1.0))

        logger.info(f"DPS submitted: guild={guild_id} user={user_id} value={value.format()} previous={previous}")

        ranked = await self.get_ranking(guild_id)
        position = next((entry.position for entry in ranked if entry.user_id == user_id), None)
        return SubmissionResult(value=value, previous=previous, position=position, total_players=len(ranked))

    async def get_ranking(self, guild_id: int) -> List[RankedEntry]:
        """Rank a snapshot of the guild's records."""
        snapshot = await self.store.list_by_guild(guild_id)
        return ranking.rank(snapshot)

    async def get_role_map(self, guild_id: int) -> Dict[int, int]:
        """Guild overrides from the database, else the map from the environment."""
        role_map = await self.store.get_role_map(guild_id)
        if role_map:
            return role_map
        return Config.get_default_role_map()

    async def compute_role_delta(self, guild_id: int, current_member_roles: Mapping[int, Set[int]], ranked: Optional[List[RankedEntry]] = None, role_map: Optional[Mapping[int, int]] = None) -> RoleDelta:
        """Role changes that bring a guild in line with its current ranking."""
        if ranked is None:
            ranked = await self.get_ranking(guild_id)
        if role_map is None:
            role_map = await self.get_role_map(guild_id)
        return ranking.role_delta(ranked, role_map, current_member_roles)
