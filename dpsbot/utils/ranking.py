"""
Leaderboard ranking and position-role calculation.

Pure functions over a snapshot of (user_id, MagnitudeValue) records. They
never touch Discord or the database; the services feed them data and apply
the results.
"""

from typing import Dict, Hashable, Iterable, List, Mapping, Set, Tuple

from dpsbot.data_models.leaderboard import RankedEntry, RoleDelta, LeaderboardPage
from dpsbot.utils.magnitude import MagnitudeValue


def rank(records: Iterable[Tuple[int, MagnitudeValue]]) -> List[RankedEntry]:
    """
    Order records by DPS, highest first.

    Equal magnitudes are ordered by ascending user ID so the same snapshot
    always produces the same leaderboard.

    Args:
        records: (user_id, value) pairs, one per user

    Returns:
        RankedEntry list with 1-based consecutive positions
    """
    ordered = sorted(records, key=lambda record: (-record[1].absolute_magnitude, record[0]))
    return [
        RankedEntry(position=position, user_id=user_id, value=value)
        for position, (user_id, value) in enumerate(ordered, start=1)
    ]


def role_delta(
    ranked: List[RankedEntry],
    role_map: Mapping[int, Hashable],
    current_member_roles: Mapping[int, Set[Hashable]],
) -> RoleDelta:
    """
    Work out which position roles to grant and revoke.

    For each configured position the user ranked there should hold the
    position's role. Anyone else holding that role loses it. Positions with
    no ranked user only produce revokes.

    Args:
        ranked: Output of rank()
        role_map: 1-based position -> role ID (sparse, e.g. {1, 2, 3, 10})
        current_member_roles: user_id -> role IDs the user holds now

    Returns:
        RoleDelta with (user_id, role_id) pairs, ordered by position then user ID
    """
    by_position = {entry.position: entry.user_id for entry in ranked}

    # A role mapped to several positions is kept by every user ranked at one of them
    entitled: Dict[Hashable, Set[int]] = {}
    for position, role_id in role_map.items():
        user_id = by_position.get(position)
        holders = entitled.setdefault(role_id, set())
        if user_id is not None:
            holders.add(user_id)

    to_grant = []
    seen_roles = []
    for position in sorted(role_map):
        role_id = role_map[position]
        user_id = by_position.get(position)
        if user_id is not None and role_id not in current_member_roles.get(user_id, set()):
            if (user_id, role_id) not in to_grant:
                to_grant.append((user_id, role_id))
        if role_id not in seen_roles:
            seen_roles.append(role_id)

    to_revoke = []
    for role_id in seen_roles:
        for user_id in sorted(current_member_roles):
            if role_id in current_member_roles[user_id] and user_id not in entitled[role_id]:
                to_revoke.append((user_id, role_id))

    return RoleDelta(to_grant=to_grant, to_revoke=to_revoke)


def paginate(ranked: List[RankedEntry], page: int, page_size: int) -> LeaderboardPage:
    """Slice a ranking into one page."""
    if not isinstance(page, int) or page < 1:
        raise ValueError("page must be a positive integer")
    if not isinstance(page_size, int) or page_size < 1 or page_size > 50:
        raise ValueError("page_size must be between 1 and 50")

    total = len(ranked)
    total_pages = (total + page_size - 1) // page_size if total > 0 else 1
    offset = (page - 1) * page_size
    return LeaderboardPage(
        entries=ranked[offset:offset + page_size],
        current_page=page,
        total_pages=total_pages,
        total_players=total,
    )
