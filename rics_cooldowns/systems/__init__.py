"""
Cooldown systems.

Each system operates on a save's cooldown state; persistence stays with
the SaveManager.
"""

from .cooldowns import (
    GlobalCooldownManager,
    COMMAND_EVENT_TYPES,
    DEFAULT_CATEGORY_CAP,
    category_cap,
)
from .messages import (
    LimitAnnouncer,
    check_command,
    cooldown_summary,
    days_until_reset,
    event_limit_message,
    global_limit_message,
    purchase_limit_message,
)

__all__ = [
    "GlobalCooldownManager",
    "COMMAND_EVENT_TYPES",
    "DEFAULT_CATEGORY_CAP",
    "category_cap",
    # Chat feedback
    "LimitAnnouncer",
    "check_command",
    "cooldown_summary",
    "days_until_reset",
    "event_limit_message",
    "global_limit_message",
    "purchase_limit_message",
]
