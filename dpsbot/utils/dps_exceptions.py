"""
Custom exceptions for the DPS ranking bot with user-friendly error messages.

The calculators raise these synchronously; cogs catch DpsBotException and
show ``user_message`` to the member who ran the command.
"""

class DpsBotException(Exception):
    """Base exception for DPS bot errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class InvalidUnitError(DpsBotException):
    """Raised when a unit symbol is not in the unit registry."""
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(
            f"Unrecognized unit '{symbol}'",
            f"❌ Unrecognized unit `{symbol}`. Use `/dpsunits` to see the supported units."
        )

class InvalidTierError(DpsBotException):
    """Raised when a sword tier is unknown or a tier range is not valid."""
    def __init__(self, tier: str, reason: str = None):
        self.tier = tier
        if reason:
            super().__init__(
                f"Invalid tier '{tier}': {reason}",
                f"❌ {reason}"
            )
        else:
            super().__init__(
                f"Unrecognized rank '{tier}'",
                f"❌ Unrecognized rank `{tier}`."
            )

class UnconvertibleError(DpsBotException):
    """Raised when an upward conversion does not divide evenly."""
    def __init__(self, from_tier: str, to_tier: str, count: int):
        self.from_tier = from_tier
        self.to_tier = to_tier
        self.count = count
        super().__init__(
            f"{count} x {from_tier} cannot be combined evenly into {to_tier}",
            f"❌ {count} `{from_tier}` swords cannot be combined evenly into `{to_tier}`."
        )

class MalformedInputError(DpsBotException):
    """Raised when free-text input cannot be parsed."""
    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(
            f"Malformed input {text!r}: {reason}",
            f"❌ {reason}"
        )

class GuildSecurityError(DpsBotException):
    """Raised when guild security checks fail."""
    def __init__(self):
        super().__init__(
            "Command used outside of guild context",
            "❌ This command can only be used in a server!"
        )

class DatabaseError(DpsBotException):
    """Raised when database operations fail."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Database error during {operation}: {details}",
            "❌ Database error occurred. Please try again later."
        )
