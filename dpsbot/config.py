import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    OWNER_DISCORD_ID = int(os.getenv('OWNER_DISCORD_ID', 0))

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///dps_ranking.db')

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')  # Empty disables the daily log file

    # Ranking settings
    DPS_ROLE_IDS = os.getenv('DPS_ROLE_IDS', '')  # "1:<role id>,2:<role id>,3:<role id>,10:<role id>"
    RANKING_PAGE_SIZE = int(os.getenv('RANKING_PAGE_SIZE', 10))
    ROLE_SYNC_INTERVAL_MINUTES = int(os.getenv('ROLE_SYNC_INTERVAL_MINUTES', 30))
    SUBMIT_COOLDOWN_SECONDS = float(os.getenv('SUBMIT_COOLDOWN_SECONDS', 10))

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            # Multi-guild support: comma-separated IDs
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def get_default_role_map(cls):
        """Get the position -> role ID map used when a guild has no override"""
        # Imported here so importing Config never drags in the parsing utilities
        from dpsbot.utils.inventory_parser import parse_role_positions
        from dpsbot.utils.dps_exceptions import MalformedInputError

        try:
            return parse_role_positions(cls.DPS_ROLE_IDS)
        except MalformedInputError as e:
            raise ValueError(f"DPS_ROLE_IDS is invalid: {e}")

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if cls.RANKING_PAGE_SIZE < 1 or cls.RANKING_PAGE_SIZE > 25:
            raise ValueError("RANKING_PAGE_SIZE must be between 1 and 25")
        if cls.ROLE_SYNC_INTERVAL_MINUTES < 1:
            raise ValueError("ROLE_SYNC_INTERVAL_MINUTES must be at least 1")
        # Fail at start-up rather than on the first /dpsrank
        cls.get_default_role_map()
