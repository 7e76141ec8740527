"""
Shared error embeds for the DPS bot cogs.
"""

import discord

from dpsbot.constants import UIConstants


class ErrorEmbeds:
    """Embeds for failures that are not tied to a specific bad input."""

    @staticmethod
    def command_error(action: str) -> discord.Embed:
        """Embed for an unexpected failure while running a command."""
        return discord.Embed(
            title="Command Error",
            description=f"Something went wrong while {action}.\n\nPlease try again later or contact an administrator.",
            color=UIConstants.ERROR_COLOR
        )

    @staticmethod
    def no_record() -> discord.Embed:
        """Embed for a member who has not submitted a DPS yet."""
        return discord.Embed(
            title="No DPS Recorded",
            description="No DPS has been recorded yet.\n\nUse `/dps` to submit one!",
            color=discord.Color.orange()
        )
