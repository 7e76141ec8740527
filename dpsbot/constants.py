"""
Bot-wide constants for the DPS ranking bot.

This module contains the magic numbers shared by the calculators, cogs and
embeds so they live in one place.
"""

class SwordConstants:
    """Constants for the sword promotion ladder."""

    # Number of lower-tier swords that combine into one sword of the next tier
    PROMOTION_RATIO = 3

    # Tier every shortage is expressed in unless the user picks another
    DEFAULT_BASE_TIER = "e"

class UnitConstants:
    """Constants for the DPS unit table."""

    # Units are listed ten at a time in /dpsunits
    GROUP_SIZE = 10

class DiscordLimits:
    """Hard limits imposed by Discord."""

    # Maximum autocomplete choices per option
    AUTOCOMPLETE_LIMIT = 25

    # Maximum fields per embed
    EMBED_FIELD_LIMIT = 25

class PaginationConstants:
    """Constants for paginated displays."""

    DEFAULT_PAGE_SIZE = 10

    # Seconds before leaderboard buttons stop responding
    VIEW_TIMEOUT = 900

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    GOLD_RANK_COLOR = 0xffd700     # Gold for #1
    ERROR_COLOR = 0xe74c3c         # Red for errors
    SUCCESS_COLOR = 0x2ecc71       # Green for success

    TROPHY_EMOJI = "🏆"
    SWORD_EMOJI = "⚔️"

    # Medals for the first three leaderboard rows
    POSITION_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}
