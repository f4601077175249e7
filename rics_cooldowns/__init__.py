"""Usage cooldowns for chat-driven colony events."""

from .state import (
    CommandSettings,
    CooldownSettings,
    CooldownState,
    FixedClock,
    SaveManager,
    UsageLedger,
    UsageRecord,
)
from .systems import GlobalCooldownManager

__all__ = [
    "CommandSettings",
    "CooldownSettings",
    "CooldownState",
    "FixedClock",
    "SaveManager",
    "UsageLedger",
    "UsageRecord",
    "GlobalCooldownManager",
]
