"""
Chat feedback for cooldown decisions.

The cooldown manager only answers yes or no. These helpers turn its
state into the short lines command handlers send back to chat.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..state.event_bus import CooldownEvent, EventBus, EventType, get_event_bus
from ..state.schema import (
    CommandSettings,
    CooldownSettings,
    EventCategory,
    UsageNamespace,
    UsageRecord,
)
from .cooldowns import category_cap

if TYPE_CHECKING:
    from .cooldowns import GlobalCooldownManager


def days_until_reset(record: UsageRecord, window_days: int, today: int) -> int | None:
    """
    Days until the oldest use in the record expires and frees a slot.

    Returns None when uses never expire or the record is empty.
    """
    if window_days == 0 or record.oldest_day is None:
        return None
    return max(0, record.oldest_day + window_days + 1 - today)


def cooldown_summary(manager: "GlobalCooldownManager", settings: CooldownSettings) -> str:
    """
    One-line usage overview, e.g. "Total: 3/25 | Good: 1/10 | Bad: 2/3".

    Unlimited caps are left out. Expired uses are pruned first.
    """
    manager.prune_expired(settings, UsageNamespace.EVENT)
    summaries = []
    data = manager.data

    if settings.event_cooldowns_enabled and settings.events_per_cooldown > 0:
        total = data.total_uses(UsageNamespace.EVENT)
        summaries.append(f"Total: {total}/{settings.events_per_cooldown}")

    for category in (EventCategory.GOOD, EventCategory.BAD, EventCategory.NEUTRAL):
        cap = category_cap(category.value, settings)
        if cap > 0:
            used = data.uses(UsageNamespace.EVENT, category.value)
            summaries.append(f"{category.value.title()}: {used}/{cap}")

    return " | ".join(summaries)


def event_limit_message(
    manager: "GlobalCooldownManager",
    category: str,
    settings: CooldownSettings,
) -> str:
    """Refusal line for an exhausted event category."""
    manager.prune_expired(settings, UsageNamespace.EVENT)
    used = manager.data.uses(UsageNamespace.EVENT, category)
    cap = category_cap(category, settings)
    message = f"❌ {category.upper()} event limit reached! ({used}/{cap} used this period)"

    record = manager.data.get(UsageNamespace.EVENT, category)
    if record is not None:
        days = days_until_reset(record, settings.event_cooldown_days, manager.current_day)
        if days:
            message += f" Next slot in {days} day{'s' if days != 1 else ''}."
    return message


def global_limit_message(manager: "GlobalCooldownManager", settings: CooldownSettings) -> str:
    manager.prune_expired(settings, UsageNamespace.EVENT)
    total = manager.data.total_uses(UsageNamespace.EVENT)
    return f"❌ Global event limit reached! ({total}/{settings.events_per_cooldown} used this period)"


def purchase_limit_message(settings: CooldownSettings) -> str:
    return (
        f"Store purchase limit reached "
        f"({settings.max_item_purchases} per {settings.event_cooldown_days} days)"
    )


def check_command(
    manager: "GlobalCooldownManager",
    command_name: str,
    command_settings: CommandSettings,
    settings: CooldownSettings,
) -> tuple[bool, str]:
    """
    Check a command and explain a refusal.

    Returns (allowed, reason) tuple. The reason names the gate that
    refused: the command's own cap, the total-events cap, or the
    command's event category.
    """
    if manager.can_use_command(command_name, command_settings, settings):
        return True, ""

    if (command_settings.use_event_cooldown
            and command_settings.max_uses_per_cooldown_period > 0):
        used = manager.data.uses(UsageNamespace.COMMAND, command_name)
        if used >= command_settings.max_uses_per_cooldown_period:
            return False, (
                f"❌ {command_name.title()} command is on cooldown. "
                f"({used}/{command_settings.max_uses_per_cooldown_period} used this period)"
            )

    if not manager.can_use_global_events(settings):
        return False, global_limit_message(manager, settings)

    category = manager.event_type_for_command(command_name)
    return False, event_limit_message(manager, category, settings)


class LimitAnnouncer:
    """
    Queues a chat line when a recorded event fills its category.

    Listens for EVENT_RECORDED on the event bus, so the cooldown manager
    never has to know about chat. The host drains the queue and posts
    the lines.

    Usage:
        announcer = LimitAnnouncer(settings)
        announcer.attach()
        ...
        for line in announcer.drain():
            send_to_chat(line)
    """

    def __init__(self, settings: CooldownSettings):
        self.settings = settings
        self._bus: EventBus | None = None
        self._pending: list[str] = []

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def attach(self, bus: EventBus | None = None) -> None:
        """Subscribe to recorded events. Uses the global bus by default."""
        self.detach()
        self._bus = bus or get_event_bus()
        self._bus.on(EventType.EVENT_RECORDED, self._on_event_recorded)

    def detach(self) -> None:
        if self._bus is not None:
            self._bus.off(EventType.EVENT_RECORDED, self._on_event_recorded)
            self._bus = None

    def drain(self) -> list[str]:
        """Return queued lines and empty the queue."""
        lines, self._pending = self._pending, []
        return lines

    def _on_event_recorded(self, event: CooldownEvent) -> None:
        category = event.data.get("category")
        if category is None:
            return

        cap = category_cap(category, self.settings)
        uses = event.data.get("uses", 0)
        # Only the use that fills the cap is announced
        if cap > 0 and uses == cap:
            self._pending.append(
                f"⏳ {category.upper()} events are on cooldown ({uses}/{cap} used this period)"
            )
