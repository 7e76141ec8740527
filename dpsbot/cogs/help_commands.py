"""
Help Commands Cog

Provides /dps-help, an interactive embed with one page per command group:
DPS ranking, sword calculator, and the admin role setup.
"""

import discord
from discord.ext import commands
from discord import app_commands

from dpsbot.constants import SwordConstants
from dpsbot.utils.logger import setup_logger
from dpsbot.utils.sword_ranks import DEFAULT_LADDER

logger = setup_logger(__name__)

HELP_CONTENT = {
    "ranking": {
        "title": "🏆 DPS Ranking",
        "description": (
            "Register your DPS and compete with everyone in the server.\n\n"
            "**Submit your DPS**\n"
            "```\n"
            "/dps value:123.4 unit:Qi\n"
            "```\n"
            "The unit box autocompletes. `/dpsunits` lists every unit from `K` (1e3) up to `Dc` (1e306).\n"
            "Submitting again replaces your previous value.\n\n"
            "**See the ranking**\n"
            "• **`/dpsrank`** - Server leaderboard with page buttons\n"
            "• **`/mydps`** - Your own value and position\n\n"
            "Ties are ordered by who registered on Discord first."
        )
    },
    "swords": {
        "title": "⚔️ Sword Calculator",
        "description": (
            "Three swords of one rank combine into one sword of the next rank.\n\n"
            "**Ranks (lowest first)**\n"
            "{ranks}\n\n"
            "**Commands**\n"
            "• **`/sword-calc start:e target:g`** - Swords of one rank needed for another\n"
            "• **`/sword-remaining target:n owned:g:1, ss:2`** - What is still missing, counted in `{base}`\n"
            "• **`/sword-breakdown target:n owned:g:1`** - What is missing at each rank\n"
            "• **`/sword-convert from:g to:e count:2`** - Convert between ranks\n\n"
            "Upward conversions must come out even: 4 `e` swords do not make a whole `d`."
        )
    },
    "roles": {
        "title": "🎖️ Rank Roles (Admin)",
        "description": (
            "Give roles to whoever holds a leaderboard position.\n\n"
            "• **`/dps-role-set position:1 role:@Champion`** - Award a role for a position\n"
            "• **`/dps-role-clear position:1`** - Stop awarding it\n"
            "• **`/dps-role-list`** - Show the current setup\n"
            "• **`/dps-delete member:@someone`** - Remove a member's record\n\n"
            "Roles are moved whenever someone runs `/dpsrank`, and periodically in the background.\n"
            "The bot needs **Manage Roles** and must sit above the rank roles."
        )
    },
}


class HelpView(discord.ui.View):
    """Interactive help view with navigation buttons"""

    def __init__(self, author):
        super().__init__(timeout=180.0)
        self.author = author
        self.current_section = "ranking"

    def _get_embed(self, section_key: str) -> discord.Embed:
        """Create embed for the specified section"""
        section = HELP_CONTENT[section_key]
        format_args = {
            "ranks": " → ".join(f"`{tier}`" for tier in DEFAULT_LADDER.tiers),
            "base": SwordConstants.DEFAULT_BASE_TIER,
        }

        embed = discord.Embed(
            title=section["title"],
            description=section["description"].format(**format_args),
            color=discord.Color.blue()
        )
        embed.set_footer(text=f"Requested by {self.author.display_name} • Use buttons to navigate")
        return embed

    async def _update_embed(self, interaction: discord.Interaction, section_key: str):
        """Update the embed to show the specified section"""
        self.current_section = section_key
        embed = self._get_embed(section_key)

        for child in self.children:
            if isinstance(child, discord.ui.Button):
                button_section = child.custom_id.split(":")[-1] if child.custom_id else ""
                child.disabled = (button_section == section_key)

        try:
            await interaction.response.edit_message(embed=embed, view=self)
        except discord.NotFound:
            # Message was deleted
            logger.debug("Help message disappeared before it could be updated")

    @discord.ui.button(label="🏆 Ranking", style=discord.ButtonStyle.secondary, custom_id="help:ranking")
    async def ranking_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._update_embed(interaction, "ranking")

    @discord.ui.button(label="⚔️ Swords", style=discord.ButtonStyle.secondary, custom_id="help:swords")
    async def swords_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._update_embed(interaction, "swords")

    @discord.ui.button(label="🎖️ Roles", style=discord.ButtonStyle.secondary, custom_id="help:roles")
    async def roles_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._update_embed(interaction, "roles")

    async def on_timeout(self):
        """Disable all buttons when the view times out"""
        for child in self.children:
            if isinstance(child, discord.ui.Button):
                child.disabled = True


class HelpCommandsCog(commands.Cog):
    """User help for the DPS and sword commands"""

    def __init__(self, bot):
        self.bot = bot

    @app_commands.command(name="dps-help", description="How to use the DPS ranking and sword calculator")
    async def dps_help(self, interaction: discord.Interaction):
        """Display interactive help guide"""
        help_view = HelpView(interaction.user)
        help_view.ranking_button.disabled = True
        await interaction.response.send_message(embed=help_view._get_embed("ranking"), view=help_view, ephemeral=True)


async def setup(bot):
    """Add the HelpCommandsCog to the bot"""
    await bot.add_cog(HelpCommandsCog(bot))
