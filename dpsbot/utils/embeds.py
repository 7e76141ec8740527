"""
Shared embed utilities for the DPS ranking bot.

Provides reusable embed building functions for the cogs and views.
"""

import discord
from typing import List, Mapping, Optional, Tuple

from dpsbot.constants import UIConstants, DiscordLimits
from dpsbot.data_models.leaderboard import LeaderboardPage
from dpsbot.utils.sword_ranks import Shortage
from dpsbot.utils.units import UnitRegistry


def build_ranking_embed(
    page_data: LeaderboardPage,
    names: Mapping[int, str],
    guild_name: Optional[str] = None,
    empty_message: str = "No DPS records yet. Use `/dps` to submit yours!"
) -> discord.Embed:
    """
    Build the DPS leaderboard embed for one page.

    Args:
        page_data: Page of ranked entries
        names: user_id -> display name; missing users show as "Unknown"
        guild_name: Shown in the title when given
        empty_message: Description used when nobody has submitted

    Returns:
        Formatted Discord embed
    """
    title = f"{UIConstants.TROPHY_EMOJI} DPS Ranking"
    if guild_name:
        title += f" - {guild_name}"

    embed = discord.Embed(title=title, color=UIConstants.GOLD_RANK_COLOR)

    if not page_data.entries:
        embed.description = empty_message
        return embed

    lines = []
    for entry in page_data.entries:
        marker = UIConstants.POSITION_MEDALS.get(entry.position, f"**{entry.position}.**")
        name = discord.utils.escape_markdown(names.get(entry.user_id, "Unknown"))
        lines.append(f"{marker} {name} - **{entry.value.format()}**")
    embed.description = "\n".join(lines)

    embed.set_footer(
        text=f"Page {page_data.current_page}/{page_data.total_pages} | Total Players: {page_data.total_players}"
    )
    return embed


def build_units_embed(registry: UnitRegistry) -> discord.Embed:
    """Unit table grouped ten at a time, one field per group."""
    embed = discord.Embed(
        title="📏 DPS Units",
        description="Submit your DPS as a number plus one of these units, e.g. `/dps value:123.4 unit:Qi`.",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )

    for label, units in registry.list_groups()[:DiscordLimits.EMBED_FIELD_LIMIT]:
        embed.add_field(
            name=label,
            value="\n".join(f"`{symbol}` 1e{exponent}" for symbol, exponent in units),
            inline=True
        )
    return embed


def build_sword_total_embed(start_tier: str, target_tier: str, total: int) -> discord.Embed:
    return discord.Embed(
        title=f"{UIConstants.SWORD_EMOJI} Sword Calculator",
        description=f"One **{target_tier}** sword takes **{total:,}** **{start_tier}** swords.",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )


def build_shortage_embed(shortage: Shortage, breakdown: Optional[List[Tuple[str, int]]] = None) -> discord.Embed:
    """
    Embed for /sword-remaining.

    Args:
        shortage: Result of RankLadder.shortage
        breakdown: Optional per-tier shortfall from RankLadder.breakdown
    """
    if shortage.needed == 0:
        embed = discord.Embed(
            title=f"{UIConstants.SWORD_EMOJI} Ready to Craft!",
            description=f"You already have enough to make a **{shortage.target_tier}** sword.",
            color=UIConstants.SUCCESS_COLOR
        )
    else:
        embed = discord.Embed(
            title=f"{UIConstants.SWORD_EMOJI} Swords Still Needed",
            description=(
                f"You need **{shortage.needed:,}** more **{shortage.base_tier}** swords "
                f"to make a **{shortage.target_tier}** sword."
            ),
            color=UIConstants.DEFAULT_EMBED_COLOR
        )

    embed.add_field(name="Required", value=f"{shortage.required:,} {shortage.base_tier}", inline=True)
    embed.add_field(name="Owned", value=f"{shortage.owned:,} {shortage.base_tier}", inline=True)

    if breakdown:
        embed.add_field(name="Per Rank", value=format_breakdown(breakdown), inline=False)
    return embed


def build_breakdown_embed(target_tier: str, breakdown: List[Tuple[str, int]]) -> discord.Embed:
    if not breakdown:
        return discord.Embed(
            title=f"{UIConstants.SWORD_EMOJI} Ready to Craft!",
            description=f"Nothing is missing for a **{target_tier}** sword.",
            color=UIConstants.SUCCESS_COLOR
        )
    return discord.Embed(
        title=f"{UIConstants.SWORD_EMOJI} Missing Swords per Rank",
        description=f"Still needed to combine into one **{target_tier}** sword:\n{format_breakdown(breakdown)}",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )


def format_breakdown(breakdown: List[Tuple[str, int]]) -> str:
    # Discord field values are capped at 1024 characters; 26 tiers fit comfortably
    return "\n".join(f"`{tier}` x {count:,}" for tier, count in breakdown)
