"""Tests for environment-driven configuration."""

import pytest

from dpsbot.config import Config


@pytest.fixture
def valid_config(monkeypatch):
    monkeypatch.setattr(Config, "DISCORD_TOKEN", "token")
    monkeypatch.setattr(Config, "RANKING_PAGE_SIZE", 10)
    monkeypatch.setattr(Config, "ROLE_SYNC_INTERVAL_MINUTES", 30)


class TestGuildIds:
    def test_multi_guild_list(self, monkeypatch):
        monkeypatch.setattr(Config, "DISCORD_GUILD_IDS", "123, 456,")
        assert Config.get_guild_ids() == [123, 456]

    def test_single_guild_fallback(self, monkeypatch):
        monkeypatch.setattr(Config, "DISCORD_GUILD_IDS", "")
        monkeypatch.setattr(Config, "DISCORD_GUILD_ID", 789)
        assert Config.get_guild_ids() == [789]

    def test_global_sync(self, monkeypatch):
        monkeypatch.setattr(Config, "DISCORD_GUILD_IDS", "")
        monkeypatch.setattr(Config, "DISCORD_GUILD_ID", 0)
        assert Config.get_guild_ids() == []

    def test_invalid_list(self, monkeypatch):
        monkeypatch.setattr(Config, "DISCORD_GUILD_IDS", "123,abc")
        with pytest.raises(ValueError):
            Config.get_guild_ids()


class TestDefaultRoleMap:
    def test_parsed_from_environment_string(self, monkeypatch):
        monkeypatch.setattr(Config, "DPS_ROLE_IDS", "1:100, 3:300")
        assert Config.get_default_role_map() == {1: 100, 3: 300}

    def test_unset(self):
        assert Config.get_default_role_map() == {}

    def test_invalid(self, monkeypatch):
        monkeypatch.setattr(Config, "DPS_ROLE_IDS", "first:100")
        with pytest.raises(ValueError, match="DPS_ROLE_IDS"):
            Config.get_default_role_map()


class TestValidate:
    def test_valid(self, valid_config):
        Config.validate()

    def test_missing_token(self, valid_config, monkeypatch):
        monkeypatch.setattr(Config, "DISCORD_TOKEN", None)
        with pytest.raises(ValueError, match="DISCORD_TOKEN"):
            Config.validate()

    @pytest.mark.parametrize("page_size", [0, 26])
    def test_page_size_bounds(self, valid_config, monkeypatch, page_size):
        monkeypatch.setattr(Config, "RANKING_PAGE_SIZE", page_size)
        with pytest.raises(ValueError):
            Config.validate()

    def test_sync_interval(self, valid_config, monkeypatch):
        monkeypatch.setattr(Config, "ROLE_SYNC_INTERVAL_MINUTES", 0)
        with pytest.raises(ValueError):
            Config.validate()

    def test_bad_role_map_fails_at_startup(self, valid_config, monkeypatch):
        monkeypatch.setattr(Config, "DPS_ROLE_IDS", "1:")
        with pytest.raises(ValueError):
            Config.validate()
