"""
Global cooldown system.

Gates how often events, chat commands and store purchases may be used
within a window of in-game days. Cooldowns are shared by every viewer:
if anyone triggers an event, it goes on cooldown for everyone.

Limits come from two places:
- CooldownSettings: global window length and per-category caps
- CommandSettings: an optional per-command cap

A cap of 0 always means unlimited.

Callers check first and record after the action succeeds:

    if cooldowns.can_use_command("raid", raid_settings, settings):
        ...  # trigger the raid
        cooldowns.record_command_use("raid", also_record_category=True)
"""

from __future__ import annotations

import logging
from typing import Mapping

from ..state.clock import GameClock
from ..state.event_bus import EventType, get_event_bus
from ..state.schema import (
    CommandSettings,
    CooldownSettings,
    CooldownState,
    EventCategory,
    UsageLedger,
    UsageNamespace,
    UsageRecord,
)

logger = logging.getLogger(__name__)


# Commands that count against an event category
COMMAND_EVENT_TYPES: dict[str, str] = {
    "raid": EventCategory.BAD.value,
    "militaryaid": EventCategory.GOOD.value,
    "weather": EventCategory.NEUTRAL.value,
}
DEFAULT_COMMAND_EVENT_TYPE = EventCategory.NEUTRAL.value

# Categories whose cap is settings-driven
CATEGORY_CAP_FIELDS: dict[str, str] = {
    EventCategory.GOOD.value: "max_good_events",
    EventCategory.BAD.value: "max_bad_events",
    EventCategory.NEUTRAL.value: "max_neutral_events",
}

# Categories with a fixed cap regardless of settings
FIXED_CATEGORY_CAPS: dict[str, int] = {
    EventCategory.DOOM.value: 1,
}

# Cap for any category not listed above
DEFAULT_CATEGORY_CAP = 10


def category_cap(category: str, settings: CooldownSettings) -> int:
    """Resolve the per-window cap for an event category. 0 = unlimited."""
    if category in CATEGORY_CAP_FIELDS:
        return getattr(settings, CATEGORY_CAP_FIELDS[category])
    return FIXED_CATEGORY_CAPS.get(category, DEFAULT_CATEGORY_CAP)


class GlobalCooldownManager:
    """
    Decides whether a resource may be used right now and records uses.

    Owns the ledger for one save. Not thread-safe: the host calls it
    from a single game thread, and any other host must serialize access.
    """

    def __init__(
        self,
        state: CooldownState,
        clock: GameClock,
        command_event_types: Mapping[str, str] | None = None,
        save_id: str = "",
    ):
        self.state = state
        self.clock = clock
        self.save_id = save_id
        self._command_event_types = {
            name.lower(): category
            for name, category in (command_event_types or COMMAND_EVENT_TYPES).items()
        }

    @property
    def data(self) -> UsageLedger:
        return self.state.data

    @property
    def current_day(self) -> int:
        return self.clock.current_day()

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def can_use_event(self, category: str, settings: CooldownSettings) -> bool:
        """
        Check whether an event of this category may fire.

        An unlimited category returns before touching the ledger.
        Unknown categories are capped at DEFAULT_CATEGORY_CAP.
        """
        max_uses = category_cap(category, settings)
        if max_uses == 0:
            return True

        record = self.data.get_or_create(UsageNamespace.EVENT, category)
        self._prune(record, settings.event_cooldown_days)

        allowed = record.current_period_uses < max_uses
        logger.debug(
            f"can_use_event {category}: {record.current_period_uses}/{max_uses} -> {allowed}"
        )
        return allowed

    def can_use_global_events(self, settings: CooldownSettings) -> bool:
        """Check the total-events cap across every category."""
        if settings.events_per_cooldown == 0:
            return True

        self.prune_expired(settings, UsageNamespace.EVENT)

        total = self.data.total_uses(UsageNamespace.EVENT)
        return total < settings.events_per_cooldown

    def record_event_use(self, category: str) -> None:
        """
        Record one use of an event category for today.

        Does not re-check limits; call can_use_event first.
        """
        record = self.data.get_or_create(UsageNamespace.EVENT, category)
        self._record(record, EventType.EVENT_RECORDED, category=category)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def event_type_for_command(self, command_name: str) -> str:
        """Map a command to the event category it counts against."""
        return self._command_event_types.get(command_name.lower(), DEFAULT_COMMAND_EVENT_TYPE)

    def can_use_command(
        self,
        command_name: str,
        command_settings: CommandSettings,
        global_settings: CooldownSettings,
    ) -> bool:
        """
        Check whether a command may run.

        Two gates, both must pass:
        1. The command's own cap, when use_event_cooldown is set and the
           cap is non-zero. Denies without consulting the global gate.
        2. The global gate, when the command respects it and event
           cooldowns are enabled: the total-events cap, then the cap of
           the category the command maps to.
        """
        if (command_settings.use_event_cooldown
                and command_settings.max_uses_per_cooldown_period > 0):
            record = self.data.get_or_create(UsageNamespace.COMMAND, command_name)
            self._prune(record, global_settings.event_cooldown_days)

            if record.current_period_uses >= command_settings.max_uses_per_cooldown_period:
                logger.debug(
                    f"Command {command_name} at its cap "
                    f"({record.current_period_uses}/{command_settings.max_uses_per_cooldown_period})"
                )
                return False

        if (command_settings.respects_global_event_cooldown
                and global_settings.event_cooldowns_enabled):
            if not self.can_use_global_events(global_settings):
                logger.debug(f"Command {command_name} blocked by total event cap")
                return False

            category = self.event_type_for_command(command_name)
            return self.can_use_event(category, global_settings)

        return True

    def record_command_use(self, command_name: str, also_record_category: bool = False) -> None:
        """
        Record one use of a command for today.

        Args:
            command_name: Command that ran
            also_record_category: Also count the use against the command's
                event category. Without it the category ledger is untouched.
        """
        record = self.data.get_or_create(UsageNamespace.COMMAND, command_name)
        self._record(record, EventType.COMMAND_RECORDED, command=command_name)

        if also_record_category:
            self.record_event_use(self.event_type_for_command(command_name))

    # -------------------------------------------------------------------------
    # Store purchases
    # -------------------------------------------------------------------------

    def can_purchase_item(self, settings: CooldownSettings) -> bool:
        """Check the store purchase cap (all item types combined)."""
        if not settings.event_cooldowns_enabled:
            return True
        if settings.max_item_purchases == 0:
            return True

        self.prune_expired(settings, UsageNamespace.PURCHASE)

        return self.data.total_uses(UsageNamespace.PURCHASE) < settings.max_item_purchases

    def record_item_purchase(
        self,
        item_type: str = "general",
        settings: CooldownSettings | None = None,
    ) -> None:
        """Record a store purchase, pruning that item type if settings are given."""
        record = self.data.get_or_create(UsageNamespace.PURCHASE, item_type)
        self._record(record, EventType.PURCHASE_RECORDED, item_type=item_type)

        if settings is not None:
            self._prune(record, settings.event_cooldown_days)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def prune_expired(
        self,
        settings: CooldownSettings,
        namespace: UsageNamespace | None = None,
    ) -> int:
        """
        Drop uses older than the window from one namespace, or all of them.

        Unlike cleanup_old_records this runs every time it is called and
        leaves last_cleanup_day alone. Returns the number of uses removed.
        """
        namespaces = list(UsageNamespace) if namespace is None else [namespace]
        today = self.current_day
        removed = 0
        for ns in namespaces:
            for record in self.data.records(ns).values():
                removed += UsageLedger.prune(record, settings.event_cooldown_days, today)
        return removed

    def cleanup_old_records(self, settings: CooldownSettings) -> bool:
        """
        Prune every record against the current window, at most once a day.

        Returns True if a sweep ran.
        """
        today = self.current_day
        if today == self.state.last_cleanup_day:
            return False

        removed = self.prune_expired(settings)

        self.state.last_cleanup_day = today
        logger.info(f"Cooldown cleanup on day {today}: removed {removed} expired uses")

        get_event_bus().emit(
            EventType.LEDGER_CLEANED,
            save_id=self.save_id,
            day=today,
            removed=removed,
        )
        return True

    def post_load(self, settings: CooldownSettings) -> None:
        """Hook for the host's load-complete callback."""
        self.cleanup_old_records(settings)

    def _prune(self, record: UsageRecord, window_days: int) -> None:
        UsageLedger.prune(record, window_days, self.current_day)

    def _record(self, record: UsageRecord, event_type: EventType, **data) -> None:
        today = self.current_day
        UsageLedger.record_use(record, today)
        logger.debug(f"Recorded {record.key} on day {today} ({record.current_period_uses} this period)")

        get_event_bus().emit(
            event_type,
            save_id=self.save_id,
            day=today,
            uses=record.current_period_uses,
            **data,
        )
