"""Shared pytest fixtures for the DPS bot tests.

database     - Initialized Database on a throwaway SQLite file.
store        - RecordStore bound to that database.
leaderboard  - LeaderboardService over the store.
fake_guild   - Builder for a mocked discord.Guild with roles and members.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

from dpsbot.config import Config
from dpsbot.database.database import Database
from dpsbot.services import LeaderboardService, RecordStore


@pytest.fixture(autouse=True)
def no_default_roles(monkeypatch):
    """Tests start without an environment role map."""
    monkeypatch.setattr(Config, "DPS_ROLE_IDS", "")


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'dps_test.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def store(database):
    return RecordStore(database.session_factory)


@pytest.fixture
def leaderboard(store):
    return LeaderboardService(store)


def http_error(cls, status, message="error"):
    """Build a discord HTTPException subclass without a real response."""
    response = SimpleNamespace(status=status, reason=message)
    return cls(response, message)


def make_member(user_id, display_name=None):
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.display_name = display_name or f"user{user_id}"
    member.add_roles = AsyncMock()
    member.remove_roles = AsyncMock()
    return member


def make_role(role_id, members=()):
    role = MagicMock(spec=discord.Role)
    role.id = role_id
    role.name = f"role{role_id}"
    role.members = list(members)
    return role


@pytest.fixture
def fake_guild():
    """
    Returns a builder: fake_guild(guild_id, members, roles).

    get_member/get_role read from the given lists; fetch_member raises NotFound.
    """
    def build(guild_id=1, members=(), roles=()):
        member_index = {m.id: m for m in members}
        role_index = {r.id: r for r in roles}
        guild = MagicMock(spec=discord.Guild)
        guild.id = guild_id
        guild.name = f"guild{guild_id}"
        guild.get_member = MagicMock(side_effect=member_index.get)
        guild.get_role = MagicMock(side_effect=role_index.get)
        guild.fetch_member = AsyncMock(side_effect=http_error(discord.NotFound, 404, "Unknown Member"))
        return guild
    return build
