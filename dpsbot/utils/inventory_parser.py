"""
Parsing utilities for free-text command options.

Handles ``tier:count`` inventories typed into the sword commands and the
``position:role`` map read from the environment.
"""

from typing import Dict, Iterator, Tuple

from dpsbot.utils.dps_exceptions import MalformedInputError


def _split_pairs(text: str) -> Iterator[Tuple[str, str, str]]:
    """Yield (entry, key, value) for each comma-separated ``key:value`` entry."""
    for raw_entry in text.split(','):
        entry = raw_entry.strip()
        if not entry:
            continue
        parts = entry.split(':')
        if len(parts) != 2:
            raise MalformedInputError(text, f"`{entry}` must be written as `name:count`.")
        yield entry, parts[0].strip(), parts[1].strip()


def _parse_count(text: str, entry: str, value: str) -> int:
    # isdigit() rejects signs, decimals and exponents
    if not value.isascii() or not value.isdigit():
        raise MalformedInputError(text, f"`{entry}` needs a whole number of 0 or more after `:`.")
    return int(value)


def parse_inventory(text: str) -> Dict[str, int]:
    """
    Parse an owned-sword list such as ``"g:1, ss:2"``.

    Args:
        text: Comma-separated ``tier:count`` pairs

    Returns:
        Mapping of lower-cased tier name to count. Blank text gives ``{}``.

    Raises:
        MalformedInputError: If an entry has no count, a bad count, no tier
            name, or repeats a tier
    """
    if text is None:
        return {}

    owned: Dict[str, int] = {}
    for entry, tier, value in _split_pairs(text):
        if not tier:
            raise MalformedInputError(text, f"`{entry}` is missing a rank name.")
        count = _parse_count(text, entry, value)
        key = tier.lower()
        if key in owned:
            raise MalformedInputError(text, f"Rank `{tier}` is listed more than once.")
        owned[key] = count
    return owned


def parse_role_positions(text: str) -> Dict[int, int]:
    """
    Parse a leaderboard position -> role ID map such as ``"1:111,2:222,10:333"``.

    Raises:
        MalformedInputError: If a position or role ID is not a positive integer
            or a position is repeated
    """
    if not text:
        return {}

    roles: Dict[int, int] = {}
    for entry, position_text, role_text in _split_pairs(text):
        position = _parse_count(text, entry, position_text) if position_text else 0
        role_id = _parse_count(text, entry, role_text)
        if position < 1 or role_id < 1:
            raise MalformedInputError(text, f"`{entry}` needs a position of 1 or more and a role ID.")
        if position in roles:
            raise MalformedInputError(text, f"Position {position} is listed more than once.")
        roles[position] = role_id
    return roles
