"""State management for chat cooldowns."""

from .schema import (
    CommandSettings,
    CooldownSave,
    CooldownSettings,
    CooldownState,
    EventCategory,
    SaveMeta,
    UsageLedger,
    UsageNamespace,
    UsageRecord,
)
from .clock import GameClock, ElapsedDaysClock, FixedClock, TICKS_PER_DAY
from .manager import SaveManager
from .store import CooldownStore, JsonCooldownStore, MemoryCooldownStore
from .event_bus import (
    EventBus,
    EventType,
    CooldownEvent,
    get_event_bus,
    reset_event_bus,
)

__all__ = [
    # Schema
    "CommandSettings",
    "CooldownSave",
    "CooldownSettings",
    "CooldownState",
    "EventCategory",
    "SaveMeta",
    "UsageLedger",
    "UsageNamespace",
    "UsageRecord",
    # Clock
    "GameClock",
    "ElapsedDaysClock",
    "FixedClock",
    "TICKS_PER_DAY",
    # Manager
    "SaveManager",
    # Store
    "CooldownStore",
    "JsonCooldownStore",
    "MemoryCooldownStore",
    # Event Bus
    "EventBus",
    "EventType",
    "CooldownEvent",
    "get_event_bus",
    "reset_event_bus",
]
