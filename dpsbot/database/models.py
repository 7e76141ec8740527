from sqlalchemy import (
    Column, Integer, String, DateTime, Float, BigInteger, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class DpsRecord(Base):
    """Latest self-reported DPS for one member of one guild."""
    __tablename__ = 'dps_records'

    id = Column(Integer, primary_key=True)
    guild_id = Column(BigInteger, nullable=False, index=True)
    user_id = Column(BigInteger, nullable=False)
    display_name = Column(String(100), nullable=True)

    # Stored as typed; the absolute value is never persisted
    mantissa = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False)

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Resubmission overwrites; exactly one row per member per guild
    __table_args__ = (UniqueConstraint('guild_id', 'user_id', name='uq_dps_guild_user'),)

    def __repr__(self):
        return f"<DpsRecord(guild={self.guild_id}, user={self.user_id}, dps={self.mantissa}{self.unit})>"

class RankRole(Base):
    """Role awarded to whoever holds a leaderboard position in a guild."""
    __tablename__ = 'rank_roles'

    id = Column(Integer, primary_key=True)
    guild_id = Column(BigInteger, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    role_id = Column(BigInteger, nullable=False)

    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        UniqueConstraint('guild_id', 'position', name='uq_rank_role_position'),
        CheckConstraint('position >= 1', name='ck_rank_role_position_positive'),
    )

    def __repr__(self):
        return f"<RankRole(guild={self.guild_id}, position={self.position}, role={self.role_id})>"
