"""
Leaderboard view components.

Provides the Previous/Next buttons under the /dpsrank embed. The view pages
through the snapshot taken when the command ran; running /dpsrank again
picks up newer submissions.
"""

import discord
from discord.ui import View, Button
from typing import List, Mapping, Optional

from dpsbot.constants import PaginationConstants
from dpsbot.data_models.leaderboard import RankedEntry
from dpsbot.utils.embeds import build_ranking_embed
from dpsbot.utils.ranking import paginate


class LeaderboardView(View):
    """Paginated DPS leaderboard view."""

    def __init__(
        self,
        ranked: List[RankedEntry],
        names: Mapping[int, str],
        guild_name: Optional[str] = None,
        page_size: int = PaginationConstants.DEFAULT_PAGE_SIZE,
        *,
        timeout: int = PaginationConstants.VIEW_TIMEOUT
    ):
        super().__init__(timeout=timeout)
        self.ranked = ranked
        self.names = names
        self.guild_name = guild_name
        self.page_size = page_size
        self.current_page = 1
        self.total_pages = paginate(ranked, 1, page_size).total_pages

        self._update_buttons()

    def build_embed(self) -> discord.Embed:
        page_data = paginate(self.ranked, self.current_page, self.page_size)
        return build_ranking_embed(page_data, self.names, self.guild_name)

    def _update_buttons(self):
        """Update button states based on current page."""
        self.clear_items()

        prev_button = Button(
            label="Previous",
            style=discord.ButtonStyle.primary,
            disabled=self.current_page <= 1,
            custom_id="dpsrank:prev"
        )
        prev_button.callback = self.previous_page
        self.add_item(prev_button)

        page_indicator = Button(
            label=f"Page {self.current_page}/{self.total_pages}",
            style=discord.ButtonStyle.secondary,
            disabled=True
        )
        self.add_item(page_indicator)

        next_button = Button(
            label="Next",
            style=discord.ButtonStyle.primary,
            disabled=self.current_page >= self.total_pages,
            custom_id="dpsrank:next"
        )
        next_button.callback = self.next_page
        self.add_item(next_button)

    async def previous_page(self, interaction: discord.Interaction):
        """Navigate to previous page."""
        if self.current_page > 1:
            self.current_page -= 1
        await self._show_page(interaction)

    async def next_page(self, interaction: discord.Interaction):
        """Navigate to next page."""
        if self.current_page < self.total_pages:
            self.current_page += 1
        await self._show_page(interaction)

    async def _show_page(self, interaction: discord.Interaction):
        self._update_buttons()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)
