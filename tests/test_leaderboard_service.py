"""Tests for LeaderboardService."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from dpsbot.config import Config
from dpsbot.services import LeaderboardService
from dpsbot.utils.dps_exceptions import DatabaseError, InvalidUnitError, MalformedInputError
from dpsbot.utils.units import DEFAULT_UNIT_REGISTRY

GUILD = 1000


@pytest.mark.asyncio
async def test_submit_score_returns_position(leaderboard):
    first = await leaderboard.submit_score(GUILD, 1, "Alice", 100, "K")
    assert first.previous is None
    assert first.position == 1
    assert first.total_players == 1

    second = await leaderboard.submit_score(GUILD, 2, "Bob", 1, "M")
    assert second.value.format() == "1M"
    assert second.position == 1
    assert second.total_players == 2


@pytest.mark.asyncio
async def test_resubmission_reports_previous_value(leaderboard):
    await leaderboard.submit_score(GUILD, 1, "Alice", 5, "qi")
    result = await leaderboard.submit_score(GUILD, 1, "Alice", 6, "QI")

    assert result.previous.format() == "5Qi"
    assert result.value.format() == "6Qi"
    assert result.total_players == 1


@pytest.mark.asyncio
async def test_invalid_input_is_not_stored(leaderboard, store):
    with pytest.raises(InvalidUnitError):
        await leaderboard.submit_score(GUILD, 1, "Alice", 5, "Zz")
    with pytest.raises(MalformedInputError):
        await leaderboard.submit_score(GUILD, 1, "Alice", float("nan"), "K")

    assert await store.list_by_guild(GUILD) == []


@pytest.mark.asyncio
async def test_get_ranking(leaderboard):
    await leaderboard.submit_score(GUILD, 1, "Alice", 100, "K")
    await leaderboard.submit_score(GUILD, 2, "Bob", 1, "M")
    await leaderboard.submit_score(GUILD, 3, "Carol", 100000, "K")

    ranked = await leaderboard.get_ranking(GUILD)
    assert [entry.user_id for entry in ranked] == [3, 2, 1]
    assert [entry.position for entry in ranked] == [1, 2, 3]


@pytest.mark.asyncio
async def test_role_map_prefers_guild_override(leaderboard, store, monkeypatch):
    monkeypatch.setattr(Config, "DPS_ROLE_IDS", "1:100,2:200")
    assert await leaderboard.get_role_map(GUILD) == {1: 100, 2: 200}

    await store.set_role(GUILD, 1, 999)
    assert await leaderboard.get_role_map(GUILD) == {1: 999}


@pytest.mark.asyncio
async def test_compute_role_delta(leaderboard, store):
    await store.set_role(GUILD, 1, 111)
    await leaderboard.submit_score(GUILD, 1, "Alice", 100, "K")
    await leaderboard.submit_score(GUILD, 2, "Bob", 1, "M")

    delta = await leaderboard.compute_role_delta(GUILD, {1: {111}})
    assert delta.to_grant == [(2, 111)]
    assert delta.to_revoke == [(1, 111)]


def mocked_store(set_side_effect):
    store = MagicMock()
    store.registry = DEFAULT_UNIT_REGISTRY
    store.set = AsyncMock(side_effect=set_side_effect)
    store.list_by_guild = AsyncMock(return_value=[])
    return store


def integrity_error():
    return IntegrityError("INSERT INTO dps_records", {}, Exception("UNIQUE constraint failed"))


@pytest.mark.asyncio
async def test_submit_retries_on_concurrent_insert(monkeypatch):
    monkeypatch.setattr("dpsbot.services.leaderboard.asyncio.sleep", AsyncMock())
    store = mocked_store([integrity_error(), None])
    service = LeaderboardService(store)

    result = await service.submit_score(GUILD, 1, "Alice", 1, "K")

    assert store.set.await_count == 2
    assert result.previous is None


@pytest.mark.asyncio
async def test_submit_gives_up_after_max_retries(monkeypatch):
    monkeypatch.setattr("dpsbot.services.leaderboard.asyncio.sleep", AsyncMock())
    store = mocked_store([integrity_error() for _ in range(3)])
    service = LeaderboardService(store, max_retries=3)

    with pytest.raises(DatabaseError):
        await service.submit_score(GUILD, 1, "Alice", 1, "K")
    assert store.set.await_count == 3


@pytest.mark.parametrize("max_retries", [0, -1])
def test_max_retries_must_allow_one_attempt(max_retries):
    with pytest.raises(ValueError):
        LeaderboardService(mocked_store([]), max_retries=max_retries)
