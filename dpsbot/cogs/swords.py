"""
Sword calculator cog.

Slash commands around the rank ladder: total swords for a target rank,
what is still missing given an inventory, and plain conversions. These
commands are stateless and work in DMs as well as servers.
"""

import discord
from discord.ext import commands
from discord import app_commands

from dpsbot.constants import SwordConstants, UIConstants
from dpsbot.utils.dps_exceptions import DpsBotException
from dpsbot.utils.embeds import build_sword_total_embed, build_shortage_embed, build_breakdown_embed
from dpsbot.utils.error_embeds import ErrorEmbeds
from dpsbot.utils.inventory_parser import parse_inventory
from dpsbot.utils.logger import setup_logger
from dpsbot.utils.sword_ranks import DEFAULT_LADDER

logger = setup_logger(__name__)


class SwordCog(commands.Cog):
    """Sword rank calculator commands."""

    def __init__(self, bot, ladder=DEFAULT_LADDER):
        self.bot = bot
        self.ladder = ladder

    async def tier_autocomplete(self, interaction: discord.Interaction, current: str) -> list[app_commands.Choice[str]]:
        """Autocomplete for sword ranks."""
        return [app_commands.Choice(name=tier, value=tier) for tier in self.ladder.search(current)]

    @app_commands.command(name="sword-calc", description="How many swords of one rank make a higher rank")
    @app_commands.describe(start="Rank you start from (e.g. e)", target="Rank you want (e.g. g)")
    @app_commands.autocomplete(start=tier_autocomplete, target=tier_autocomplete)
    async def sword_calc(self, interaction: discord.Interaction, start: str, target: str):
        try:
            total = self.ladder.total_needed(start, target)
            embed = build_sword_total_embed(start.strip().lower(), target.strip().lower(), total)
            await interaction.response.send_message(embed=embed)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)

    @app_commands.command(name="sword-remaining", description="Swords still needed for a rank, given what you own")
    @app_commands.describe(
        target="Rank you want to make",
        owned="What you have, e.g. g:1, ss:2 (leave empty if nothing)",
        base="Rank to count the shortage in (default e)"
    )
    @app_commands.autocomplete(target=tier_autocomplete, base=tier_autocomplete)
    async def sword_remaining(
        self,
        interaction: discord.Interaction,
        target: str,
        owned: str = "",
        base: str = SwordConstants.DEFAULT_BASE_TIER
    ):
        try:
            inventory = parse_inventory(owned)
            shortage = self.ladder.shortage(target, inventory, base)
            # The per-rank walk always ends at the lowest rank
            breakdown = None
            if shortage.needed and shortage.base_tier == self.ladder.lowest:
                breakdown = self.ladder.breakdown(target, inventory)
            await interaction.response.send_message(embed=build_shortage_embed(shortage, breakdown))
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
        except Exception as e:
            logger.error(f"Error in sword-remaining for user {interaction.user.id}: {e}", exc_info=True)
            await interaction.response.send_message(embed=ErrorEmbeds.command_error("counting your swords"), ephemeral=True)

    @app_commands.command(name="sword-breakdown", description="Missing swords per rank for a target rank")
    @app_commands.describe(target="Rank you want to make", owned="What you have, e.g. g:1, ss:2")
    @app_commands.autocomplete(target=tier_autocomplete)
    async def sword_breakdown(self, interaction: discord.Interaction, target: str, owned: str = ""):
        try:
            inventory = parse_inventory(owned)
            breakdown = self.ladder.breakdown(target, inventory)
            await interaction.response.send_message(embed=build_breakdown_embed(target.strip().lower(), breakdown))
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)

    @app_commands.command(name="sword-convert", description="Convert a number of swords to another rank")
    @app_commands.describe(
        from_rank="Rank the swords are in",
        to_rank="Rank to express them in",
        count="Number of swords"
    )
    @app_commands.rename(from_rank="from", to_rank="to")
    @app_commands.autocomplete(from_rank=tier_autocomplete, to_rank=tier_autocomplete)
    async def sword_convert(
        self,
        interaction: discord.Interaction,
        from_rank: str,
        to_rank: str,
        count: app_commands.Range[int, 0]
    ):
        try:
            converted = self.ladder.convert(from_rank, to_rank, count)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        embed = discord.Embed(
            title=f"{UIConstants.SWORD_EMOJI} Sword Conversion",
            description=f"**{count:,}** `{from_rank.strip().lower()}` = **{converted:,}** `{to_rank.strip().lower()}`",
            color=UIConstants.DEFAULT_EMBED_COLOR
        )
        await interaction.response.send_message(embed=embed)


async def setup(bot):
    await bot.add_cog(SwordCog(bot))
