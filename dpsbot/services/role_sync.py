"""
Applies leaderboard role changes to a Discord guild.

The ranking utilities decide who should hold which position role; this
module reads current role membership from the guild and performs the
grant/revoke calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

import discord

from dpsbot.data_models.leaderboard import RoleDelta

logger = logging.getLogger(__name__)

AUDIT_REASON = "DPS leaderboard position changed"


@dataclass
class RoleSyncResult:
    granted: List[Tuple[int, int]] = field(default_factory=list)
    revoked: List[Tuple[int, int]] = field(default_factory=list)
    failed: List[Tuple[int, int, str]] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return len(self.granted) + len(self.revoked)


def collect_member_roles(guild: discord.Guild, role_ids: Iterable[int]) -> Dict[int, Set[int]]:
    """
    Current holders of the given roles, as user_id -> role IDs.

    Relies on the member cache, so the bot needs the members intent.
    Roles that no longer exist in the guild are skipped.
    """
    member_roles: Dict[int, Set[int]] = {}
    for role_id in set(role_ids):
        role = guild.get_role(role_id)
        if role is None:
            logger.warning(f"Configured role {role_id} not found in guild {guild.id}")
            continue
        for member in role.members:
            member_roles.setdefault(member.id, set()).add(role_id)
    return member_roles


async def _resolve_member(guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
    member = guild.get_member(user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(user_id)
    except discord.NotFound:
        return None


async def apply_role_delta(guild: discord.Guild, delta: RoleDelta) -> RoleSyncResult:
    """
    Perform the role changes in delta.

    Revokes run before grants so two members never share a position role.
    Each call is isolated: a failure is recorded and the rest still run.
    """
    result = RoleSyncResult()

    operations = [("revoke", pair) for pair in delta.to_revoke] + [("grant", pair) for pair in delta.to_grant]
    for action, (user_id, role_id) in operations:
        role = guild.get_role(role_id)
        if role is None:
            result.failed.append((user_id, role_id, "role not found"))
            continue

        try:
            member = await _resolve_member(guild, user_id)
            if member is None:
                # Left the guild; nothing to grant or revoke
                result.failed.append((user_id, role_id, "member not found"))
                continue

            if action == "revoke":
                await member.remove_roles(role, reason=AUDIT_REASON)
                result.revoked.append((user_id, role_id))
                logger.info(f"Revoked role {role.name} ({role_id}) from {member} in guild {guild.id}")
            else:
                await member.add_roles(role, reason=AUDIT_REASON)
                result.granted.append((user_id, role_id))
                logger.info(f"Granted role {role.name} ({role_id}) to {member} in guild {guild.id}")

        except discord.Forbidden:
            logger.error(f"Missing permission to {action} role {role_id} for user {user_id} in guild {guild.id}")
            result.failed.append((user_id, role_id, "missing permissions"))
        except discord.HTTPException as e:
            logger.error(f"HTTP error during role {action} for user {user_id} in guild {guild.id}: {e}")
            result.failed.append((user_id, role_id, f"HTTP {e.status}"))

    return result


async def sync_guild_roles(leaderboard_service, guild: discord.Guild, ranked=None) -> Optional[RoleSyncResult]:
    """
    Bring a guild's position roles in line with its current ranking.

    Returns:
        RoleSyncResult, or None when the guild has no position roles configured
    """
    role_map = await leaderboard_service.get_role_map(guild.id)
    if not role_map:
        return None

    current_member_roles = collect_member_roles(guild, role_map.values())
    delta = await leaderboard_service.compute_role_delta(guild.id, current_member_roles, ranked=ranked, role_map=role_map)
    if delta.is_empty:
        return RoleSyncResult()

    result = await apply_role_delta(guild, delta)
    logger.info(
        f"Role sync for guild {guild.id}: {len(result.granted)} granted, "
        f"{len(result.revoked)} revoked, {len(result.failed)} failed"
    )
    return result
