"""
Record store for DPS submissions and per-guild position roles.

Keeps exactly one DPS record per (guild, member) and converts rows to and
from MagnitudeValue at the boundary so callers never see ORM objects.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from dpsbot.database.models import DpsRecord, RankRole
from dpsbot.services.base import BaseService
from dpsbot.utils.dps_exceptions import DatabaseError, InvalidUnitError, MalformedInputError
from dpsbot.utils.magnitude import MagnitudeValue
from dpsbot.utils.units import UnitRegistry, DEFAULT_UNIT_REGISTRY

logger = logging.getLogger(__name__)


class RecordStore(BaseService):
    """Async store over the dps_records and rank_roles tables."""

    def __init__(self, session_factory, registry: UnitRegistry = DEFAULT_UNIT_REGISTRY):
        super().__init__(session_factory)
        self.registry = registry

    def _to_value(self, record: DpsRecord) -> Optional[MagnitudeValue]:
        try:
            return MagnitudeValue.create(record.mantissa, record.unit, self.registry)
        except (InvalidUnitError, MalformedInputError) as e:
            logger.warning(
                f"Skipping unreadable DPS record guild={record.guild_id} user={record.user_id}: {e}"
            )
            return None

    async def get(self, guild_id: int, user_id: int) -> Optional[MagnitudeValue]:
        """Current value for a member, or None if they never submitted."""
        try:
            async with self.get_session() as session:
                record = await session.scalar(
                    select(DpsRecord).where(
                        DpsRecord.guild_id == guild_id,
                        DpsRecord.user_id == user_id
                    )
                )
                return self._to_value(record) if record else None
        except SQLAlchemyError as e:
            raise DatabaseError("record lookup", str(e))

    async def set(self, guild_id: int, user_id: int, value: MagnitudeValue, display_name: Optional[str] = None) -> Optional[MagnitudeValue]:
        """
        Store a member's value, replacing any earlier one.

        Returns:
            The value that was replaced, or None for a first submission
        """
        try:
            async with self.get_session() as session:
                record = await session.scalar(
                    select(DpsRecord)
                    .where(DpsRecord.guild_id == guild_id, DpsRecord.user_id == user_id)
                    .with_for_update()
                )

                if record:
                    previous = self._to_value(record)
                    record.mantissa = value.mantissa
                    record.unit = value.unit
                    if display_name:
                        record.display_name = display_name
                else:
                    previous = None
                    session.add(DpsRecord(
                        guild_id=guild_id,
                        user_id=user_id,
                        display_name=display_name,
                        mantissa=value.mantissa,
                        unit=value.unit
                    ))
                # Commit happens automatically on context exit
            return previous
        except IntegrityError:
            # Concurrent first submission; the caller retries
            raise
        except SQLAlchemyError as e:
            raise DatabaseError("score submission", str(e))

    async def list_by_guild(self, guild_id: int) -> List[Tuple[int, MagnitudeValue]]:
        """Snapshot of every readable record in a guild."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(DpsRecord).where(DpsRecord.guild_id == guild_id)
                )
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise DatabaseError("leaderboard snapshot", str(e))

        snapshot = []
        for record in records:
            value = self._to_value(record)
            if value is not None:
                snapshot.append((record.user_id, value))
        return snapshot

    async def get_display_names(self, guild_id: int) -> Dict[int, str]:
        """Last known display names, used when a member has left the guild."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(DpsRecord.user_id, DpsRecord.display_name).where(DpsRecord.guild_id == guild_id)
                )
                return {row.user_id: row.display_name for row in result if row.display_name}
        except SQLAlchemyError as e:
            raise DatabaseError("display name lookup", str(e))

    async def delete(self, guild_id: int, user_id: int) -> bool:
        """Remove a member's record. Returns False if there was none."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    delete(DpsRecord).where(
                        DpsRecord.guild_id == guild_id,
                        DpsRecord.user_id == user_id
                    )
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise DatabaseError("record deletion", str(e))

    async def get_role_map(self, guild_id: int) -> Dict[int, int]:
        """Position -> role ID overrides configured for a guild."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(RankRole).where(RankRole.guild_id == guild_id).order_by(RankRole.position)
                )
                return {row.position: row.role_id for row in result.scalars().all()}
        except SQLAlchemyError as e:
            raise DatabaseError("role map lookup", str(e))

    async def set_role(self, guild_id: int, position: int, role_id: int) -> None:
        """Award role_id to whoever holds position, replacing any earlier role."""
        if position < 1:
            raise ValueError("position must be 1 or more")
        try:
            async with self.get_session() as session:
                rank_role = await session.scalar(
                    select(RankRole).where(
                        RankRole.guild_id == guild_id,
                        RankRole.position == position
                    )
                )
                if rank_role:
                    rank_role.role_id = role_id
                else:
                    session.add(RankRole(guild_id=guild_id, position=position, role_id=role_id))
        except SQLAlchemyError as e:
            raise DatabaseError("role configuration", str(e))

    async def clear_role(self, guild_id: int, position: int) -> bool:
        """Stop awarding a role for position. Returns False if none was set."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    delete(RankRole).where(
                        RankRole.guild_id == guild_id,
                        RankRole.position == position
                    )
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise DatabaseError("role configuration", str(e))
