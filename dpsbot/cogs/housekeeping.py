"""
Housekeeping Cog - Background Tasks & Owner Commands

Periodically re-applies the leaderboard position roles in every guild so
that members who joined, left, or lost a role by hand end up consistent
with the ranking even when nobody runs /dpsrank.
"""

import discord
from discord import app_commands
from discord.ext import commands, tasks
from datetime import datetime, timezone

from dpsbot.config import Config
from dpsbot.services.role_sync import sync_guild_roles
from dpsbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class HousekeepingCog(commands.Cog):
    """Background role sync and maintenance commands"""

    def __init__(self, bot):
        self.bot = bot
        self.logger = logger

    async def cog_load(self):
        self.periodic_role_sync.start()
        self.logger.info("HousekeepingCog: Background tasks started")

    def cog_unload(self):
        """Stop background tasks when cog is unloaded"""
        self.periodic_role_sync.cancel()
        self.logger.info("HousekeepingCog: Background tasks stopped")

    async def sync_all_guilds(self):
        """
        Run a role sync for every guild the bot is in.

        Returns:
            (guilds synced, role changes made, failed changes)
        """
        synced = changed = failed = 0
        for guild in self.bot.guilds:
            try:
                result = await sync_guild_roles(self.bot.leaderboard_service, guild)
            except Exception as e:
                # One broken guild must not stop the others
                self.logger.error(f"Role sync failed for guild {guild.id}: {e}", exc_info=True)
                continue
            if result is None:
                continue
            synced += 1
            changed += result.changed
            failed += len(result.failed)
        return synced, changed, failed

    @tasks.loop(minutes=Config.ROLE_SYNC_INTERVAL_MINUTES)
    async def periodic_role_sync(self):
        """Background task that re-applies position roles"""
        try:
            synced, changed, failed = await self.sync_all_guilds()
            if changed or failed:
                self.logger.info(f"Periodic role sync: {synced} guilds, {changed} changes, {failed} failures")
        except Exception as e:
            self.logger.error(f"Error in periodic role sync: {e}", exc_info=True)

    @periodic_role_sync.before_loop
    async def before_role_sync(self):
        """Wait for bot to be ready before starting the sync task"""
        await self.bot.wait_until_ready()

    @commands.command(name="sync_roles")
    @commands.is_owner()
    async def manual_sync(self, ctx):
        """Manual command to trigger a role sync (owner only)"""
        synced, changed, failed = await self.sync_all_guilds()
        await ctx.send(f"✅ Synced roles in {synced} guild(s): {changed} change(s), {failed} failure(s).")

    @app_commands.command(
        name="admin-sync-roles",
        description="Re-apply DPS rank roles in every server now (Owner only)"
    )
    async def admin_sync_roles(self, interaction: discord.Interaction):
        """Slash command version of the manual role sync"""
        if interaction.user.id != Config.OWNER_DISCORD_ID:
            await interaction.response.send_message(
                "❌ **Access Denied**\nThis command is restricted to the bot owner.",
                ephemeral=True
            )
            return

        await interaction.response.defer(ephemeral=True)
        synced, changed, failed = await self.sync_all_guilds()

        embed = discord.Embed(
            title="✅ Role Sync Complete",
            description=f"Synced **{synced}** server(s) with **{changed}** role change(s).",
            color=discord.Color.green() if not failed else discord.Color.orange(),
            timestamp=datetime.now(timezone.utc)
        )
        if failed:
            embed.add_field(name="Failed Changes", value=str(failed), inline=True)
        await interaction.followup.send(embed=embed)

        self.logger.info(
            f"Admin role sync executed by {interaction.user.id} ({interaction.user.name}): "
            f"{synced} guilds, {changed} changes, {failed} failures"
        )


async def setup(bot):
    await bot.add_cog(HousekeepingCog(bot))
