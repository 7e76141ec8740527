"""
DPS cog - score submission, ranking display and position roles.

Members submit a DPS as a number plus a unit (K, M, ... Dc). /dpsrank shows
the guild leaderboard and hands the configured position roles to the
current top members.
"""

import discord
from discord.ext import commands
from discord import app_commands
from typing import Dict, List, Optional

from dpsbot.config import Config
from dpsbot.constants import UIConstants
from dpsbot.data_models.leaderboard import RankedEntry
from dpsbot.services.role_sync import sync_guild_roles
from dpsbot.utils.dps_exceptions import DpsBotException, GuildSecurityError
from dpsbot.utils.embeds import build_units_embed
from dpsbot.utils.error_embeds import ErrorEmbeds
from dpsbot.utils.logger import setup_logger
from dpsbot.views.leaderboard import LeaderboardView

logger = setup_logger(__name__)


class DpsCog(commands.Cog):
    """DPS submission and leaderboard commands."""

    def __init__(self, bot):
        self.bot = bot
        self.leaderboard_service = bot.leaderboard_service
        self.registry = bot.record_store.registry

    async def _resolve_names(self, guild: discord.Guild, ranked: List[RankedEntry]) -> Dict[int, str]:
        """Current display names, falling back to the name stored with the record."""
        stored = await self.bot.record_store.get_display_names(guild.id)
        names = {}
        for entry in ranked:
            member = guild.get_member(entry.user_id)
            names[entry.user_id] = member.display_name if member else stored.get(entry.user_id, "Unknown")
        return names

    @app_commands.command(name="dps", description="Submit your DPS (e.g. value:123.4 unit:Qi)")
    @app_commands.describe(
        value="Your DPS number (e.g. 12345 or 1.5)",
        unit="Unit of the number (K, M, B, ... Dc)"
    )
    @app_commands.checks.cooldown(rate=1, per=Config.SUBMIT_COOLDOWN_SECONDS, key=lambda i: i.user.id)
    async def dps(self, interaction: discord.Interaction, value: float, unit: str):
        """Submit or overwrite your DPS for this server."""
        try:
            if not interaction.guild:
                raise GuildSecurityError()

            await interaction.response.defer()

            result = await self.leaderboard_service.submit_score(
                interaction.guild.id, interaction.user.id,
                interaction.user.display_name, value, unit
            )

            embed = discord.Embed(
                title="DPS Registered!",
                description=f"**{result.value.format()}**",
                color=UIConstants.SUCCESS_COLOR
            )
            if result.previous is not None:
                embed.add_field(name="Previous", value=result.previous.format(), inline=True)
            if result.position is not None:
                embed.add_field(name="Server Rank", value=f"#{result.position} / {result.total_players}", inline=True)

            await interaction.followup.send(embed=embed)

        except DpsBotException as e:
            # User-friendly errors that should be shown to the user
            await self._send_error(interaction, e.user_message)

        except Exception as e:
            logger.error(f"Unexpected error in DPS submission for user {interaction.user.id}: {e}", exc_info=True)
            await self._send_error(interaction, embed=ErrorEmbeds.command_error("saving your DPS"))

    @dps.autocomplete('unit')
    async def unit_autocomplete(self, interaction: discord.Interaction, current: str) -> list[app_commands.Choice[str]]:
        """Autocomplete for unit symbols."""
        return [app_commands.Choice(name=symbol, value=symbol) for symbol in self.registry.search(current)]

    @dps.error
    async def dps_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle the per-user submission cooldown. Other errors reach the global handler."""
        if isinstance(error, app_commands.CommandOnCooldown):
            await interaction.response.send_message(
                f"⏰ You're on cooldown! Please wait {error.retry_after:.0f} seconds before submitting again.",
                ephemeral=True
            )

    @app_commands.command(name="dpsrank", description="Show the server DPS ranking and update rank roles")
    async def dpsrank(self, interaction: discord.Interaction):
        """Display the guild leaderboard and sync position roles."""
        try:
            if not interaction.guild:
                raise GuildSecurityError()

            await interaction.response.defer()

            guild = interaction.guild
            ranked = await self.leaderboard_service.get_ranking(guild.id)
            names = await self._resolve_names(guild, ranked)

            view = LeaderboardView(ranked, names, guild.name, page_size=Config.RANKING_PAGE_SIZE)
            await interaction.followup.send(embed=view.build_embed(), view=view)

            if not ranked:
                return

            sync_result = await sync_guild_roles(self.leaderboard_service, guild, ranked=ranked)
            if sync_result and sync_result.failed:
                await interaction.followup.send(
                    f"⚠️ {len(sync_result.failed)} rank role change(s) failed. "
                    "Please check that the bot has Manage Roles and sits above the rank roles.",
                    ephemeral=True
                )

        except DpsBotException as e:
            await self._send_error(interaction, e.user_message)

        except Exception as e:
            logger.error(f"Error in dpsrank command: {e}", exc_info=True)
            await self._send_error(interaction, embed=ErrorEmbeds.command_error("building the ranking"))

    @app_commands.command(name="mydps", description="Show your registered DPS and rank")
    async def mydps(self, interaction: discord.Interaction):
        """Show the caller's current record."""
        if not interaction.guild:
            await interaction.response.send_message(GuildSecurityError().user_message, ephemeral=True)
            return

        try:
            ranked = await self.leaderboard_service.get_ranking(interaction.guild.id)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        entry = next((e for e in ranked if e.user_id == interaction.user.id), None)
        if entry is None:
            await interaction.response.send_message(embed=ErrorEmbeds.no_record(), ephemeral=True)
            return

        embed = discord.Embed(
            title=f"{interaction.user.display_name}'s DPS",
            description=f"**{entry.value.format()}**",
            color=UIConstants.DEFAULT_EMBED_COLOR
        )
        embed.add_field(name="Server Rank", value=f"#{entry.position} / {len(ranked)}", inline=True)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="dpsunits", description="List the supported DPS units")
    async def dpsunits(self, interaction: discord.Interaction):
        """Show the unit table."""
        await interaction.response.send_message(embed=build_units_embed(self.registry), ephemeral=True)

    @app_commands.command(name="dps-role-set", description="Give a role to whoever holds a ranking position (Admin)")
    @app_commands.describe(position="Leaderboard position (1 = top)", role="Role to award")
    @app_commands.default_permissions(manage_roles=True)
    @app_commands.checks.has_permissions(manage_roles=True)
    @app_commands.guild_only()
    async def dps_role_set(self, interaction: discord.Interaction, position: app_commands.Range[int, 1, 1000], role: discord.Role):
        """Configure a position role for this guild."""
        try:
            await self.bot.record_store.set_role(interaction.guild.id, position, role.id)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        logger.info(f"Position role set by {interaction.user.id} in guild {interaction.guild.id}: #{position} -> {role.id}")
        await interaction.response.send_message(
            f"✅ Rank **#{position}** now receives {role.mention}. It will be assigned on the next `/dpsrank`.",
            ephemeral=True
        )

    @app_commands.command(name="dps-role-clear", description="Stop awarding a role for a ranking position (Admin)")
    @app_commands.describe(position="Leaderboard position to clear")
    @app_commands.default_permissions(manage_roles=True)
    @app_commands.checks.has_permissions(manage_roles=True)
    @app_commands.guild_only()
    async def dps_role_clear(self, interaction: discord.Interaction, position: app_commands.Range[int, 1, 1000]):
        try:
            removed = await self.bot.record_store.clear_role(interaction.guild.id, position)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        if removed:
            logger.info(f"Position role cleared by {interaction.user.id} in guild {interaction.guild.id}: #{position}")
            await interaction.response.send_message(f"✅ Rank **#{position}** no longer has a role.", ephemeral=True)
        else:
            await interaction.response.send_message(f"ℹ️ Rank **#{position}** had no role configured.", ephemeral=True)

    @app_commands.command(name="dps-role-list", description="Show the ranking position roles (Admin)")
    @app_commands.default_permissions(manage_roles=True)
    @app_commands.guild_only()
    async def dps_role_list(self, interaction: discord.Interaction):
        try:
            role_map = await self.leaderboard_service.get_role_map(interaction.guild.id)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        if not role_map:
            await interaction.response.send_message(
                "ℹ️ No rank roles configured. Use `/dps-role-set` to add one.", ephemeral=True
            )
            return

        lines = [f"**#{position}** → <@&{role_id}>" for position, role_id in sorted(role_map.items())]
        embed = discord.Embed(
            title="Rank Roles",
            description="\n".join(lines),
            color=UIConstants.DEFAULT_EMBED_COLOR
        )
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="dps-delete", description="Remove a member's DPS record (Admin)")
    @app_commands.describe(member="Member whose record should be removed")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.checks.has_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def dps_delete(self, interaction: discord.Interaction, member: discord.User):
        try:
            removed = await self.bot.record_store.delete(interaction.guild.id, member.id)
        except DpsBotException as e:
            await interaction.response.send_message(e.user_message, ephemeral=True)
            return

        if removed:
            logger.info(f"DPS record of {member.id} deleted by {interaction.user.id} in guild {interaction.guild.id}")
            await interaction.response.send_message(f"🗑️ Removed the DPS record of {member.mention}.", ephemeral=True)
        else:
            await interaction.response.send_message(f"ℹ️ {member.mention} has no DPS record.", ephemeral=True)

    async def _send_error(self, interaction: discord.Interaction, message: Optional[str] = None, embed: Optional[discord.Embed] = None):
        if interaction.response.is_done():
            await interaction.followup.send(message, embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(message, embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(DpsCog(bot))
