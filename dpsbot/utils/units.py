"""
DPS unit table.

Maps unit symbols (K, M, B, ... Dc) to the power of ten they stand for.
The table is defined once at import time and never changes at runtime.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from dpsbot.constants import UnitConstants, DiscordLimits
from dpsbot.utils.dps_exceptions import InvalidUnitError


# (exponent, symbol), ten per line to match the groups shown by /dpsunits
UNIT_TABLE: List[Tuple[int, str]] = [
    (3, "K"), (6, "M"), (9, "B"), (12, "T"), (15, "Qa"),
    (18, "Qi"), (21, "Sx"), (24, "Sp"), (27, "Oc"), (30, "No"),

    (33, "Ud"), (36, "Dd"), (39, "Td"), (42, "Qad"), (45, "Qid"),
    (48, "Sxd"), (51, "Spd"), (54, "Ocd"), (57, "Nod"), (60, "Vg"),

    (63, "Uvg"), (66, "Dvg"), (69, "Tvg"), (72, "Qavg"), (75, "Qivg"),
    (78, "Sxvg"), (81, "Spvg"), (84, "Ocvg"), (87, "Novg"), (90, "Tg"),

    (93, "Utg"), (96, "Dtg"), (99, "Ttg"), (102, "Qatg"), (105, "Qitg"),
    (108, "Sxtg"), (111, "Sptg"), (114, "Octg"), (117, "Notg"), (120, "Qag"),

    (123, "Uqag"), (126, "Dqag"), (129, "Tqag"), (132, "Qaqag"), (135, "Qiqag"),
    (138, "Sxqag"), (141, "Spqag"), (144, "Ocqag"), (147, "Noqag"), (150, "Qig"),

    (153, "Uqig"), (156, "Dqig"), (159, "Tqig"), (162, "Qaqig"), (165, "Qiqig"),
    (168, "Sxqig"), (171, "Spqig"), (174, "Ocqig"), (177, "Noqig"), (180, "Sxg"),

    (183, "Usxg"), (186, "Dsxg"), (189, "Tsxg"), (192, "Qasxg"), (195, "Qisxg"),
    (198, "Sxsxg"), (201, "Spsxg"), (204, "Ocsxg"), (207, "Nosxg"), (210, "Spg"),

    (213, "Uspg"), (216, "Dspg"), (219, "Tspg"), (222, "Qaspg"), (225, "Qispg"),
    (228, "Sxspg"), (231, "Spspg"), (234, "Ocspg"), (237, "Nospg"), (240, "Ocg"),

    (243, "Uocg"), (246, "Docg"), (249, "Tocg"), (252, "Qaocg"), (255, "Qiocg"),
    (258, "Sxocg"), (261, "Spocg"), (264, "Ococg"), (267, "Noocg"), (270, "Nog"),

    (273, "Unog"), (276, "Dnog"), (279, "Tnog"), (282, "Qanog"), (285, "Qinog"),
    (288, "Sxnog"), (291, "Spnog"), (294, "Ocnog"), (297, "Nonog"), (300, "c"),

    (303, "Uc"), (306, "Dc"),
]

UnitGroup = Tuple[str, List[Tuple[str, int]]]


class UnitRegistry:
    """Ordered, case-insensitive symbol -> exponent table."""

    def __init__(self, entries: Sequence[Tuple[int, str]], group_size: int = UnitConstants.GROUP_SIZE):
        """
        Build a registry from (exponent, symbol) pairs.

        Args:
            entries: Pairs in strictly increasing exponent order
            group_size: Number of consecutive units per display group

        Raises:
            ValueError: If the table is empty, out of order, or repeats a symbol
        """
        if not entries:
            raise ValueError("Unit table must not be empty")
        if group_size < 1:
            raise ValueError("group_size must be positive")

        self._entries: List[Tuple[int, str]] = []
        self._by_symbol = {}
        previous_exponent = None
        for exponent, symbol in entries:
            key = symbol.lower()
            if not key:
                raise ValueError("Unit symbols must not be empty")
            if key in self._by_symbol:
                raise ValueError(f"Duplicate unit symbol: {symbol}")
            if previous_exponent is not None and exponent <= previous_exponent:
                raise ValueError(
                    f"Unit table must be strictly increasing: {symbol} ({exponent}) follows {previous_exponent}"
                )
            self._entries.append((exponent, symbol))
            self._by_symbol[key] = (exponent, symbol)
            previous_exponent = exponent

        self._group_size = group_size

    def lookup(self, symbol: str) -> int:
        """
        Return the power of ten for a unit symbol.

        Raises:
            InvalidUnitError: If the symbol is not registered
        """
        return self._find(symbol)[0]

    def canonical_symbol(self, symbol: str) -> str:
        """Return the registry spelling of a symbol (``"qi"`` -> ``"Qi"``)."""
        return self._find(symbol)[1]

    def _find(self, symbol: str) -> Tuple[int, str]:
        if not isinstance(symbol, str):
            raise InvalidUnitError(str(symbol))
        found = self._by_symbol.get(symbol.strip().lower())
        if found is None:
            raise InvalidUnitError(symbol)
        return found

    def list_groups(self) -> List[UnitGroup]:
        """
        Partition the table into display groups of consecutive units.

        Returns:
            List of (label, [(symbol, exponent), ...]) in ascending order
        """
        groups = []
        for start in range(0, len(self._entries), self._group_size):
            chunk = self._entries[start:start + self._group_size]
            label = f"{chunk[0][1]} ~ {chunk[-1][1]}" if len(chunk) > 1 else chunk[0][1]
            groups.append((label, [(symbol, exponent) for exponent, symbol in chunk]))
        return groups

    def search(self, current: str, limit: int = DiscordLimits.AUTOCOMPLETE_LIMIT) -> List[str]:
        """Symbols for autocomplete: prefix matches first, then substring matches."""
        needle = (current or "").strip().lower()
        symbols = self.symbols()
        if not needle:
            return symbols[:limit]
        prefix = [s for s in symbols if s.lower().startswith(needle)]
        contains = [s for s in symbols if needle in s.lower() and s not in prefix]
        return (prefix + contains)[:limit]

    def symbols(self) -> List[str]:
        return [symbol for _, symbol in self._entries]

    def min_exponent(self) -> int:
        return self._entries[0][0]

    def max_exponent(self) -> int:
        return self._entries[-1][0]

    def get(self, symbol: str) -> Optional[int]:
        """Like lookup, but returns None for an unknown symbol."""
        try:
            return self.lookup(symbol)
        except InvalidUnitError:
            return None

    def __contains__(self, symbol) -> bool:
        return isinstance(symbol, str) and symbol.strip().lower() in self._by_symbol

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_UNIT_REGISTRY = UnitRegistry(UNIT_TABLE)
