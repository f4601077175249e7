"""
Pydantic models for cooldown state.

The ledger is persisted inside the host's save file. Field aliases
match the save layout (eventUsage, commandUsage, buyUsage, usageDays).
Records written by older versions name their key eventType,
commandName or itemType, and purchase records keep purchaseDays;
both are accepted on load and written back in the current layout.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class UsageNamespace(str, Enum):
    """Independent resource classes tracked by the ledger."""
    EVENT = "event"          # Karma categories: good, bad, neutral, doom
    COMMAND = "command"      # Chat command names: raid, weather, ...
    PURCHASE = "purchase"    # Store item types: weapon, apparel, general, ...


class EventCategory(str, Enum):
    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"
    DOOM = "doom"


# -----------------------------------------------------------------------------
# Usage Ledger
# -----------------------------------------------------------------------------

class UsageRecord(BaseModel):
    """
    Days on which a single resource was used.

    One entry per use. Entries are appended on use and bulk-removed
    on pruning; they are never edited in place.
    """
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(
        validation_alias=AliasChoices("key", "eventType", "commandName", "itemType"),
        serialization_alias="key",
    )
    usage_days: list[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("usageDays", "purchaseDays", "usage_days"),
        serialization_alias="usageDays",
    )

    @property
    def current_period_uses(self) -> int:
        """Uses still inside the cooldown window."""
        return len(self.usage_days)

    @property
    def oldest_day(self) -> int | None:
        return min(self.usage_days) if self.usage_days else None

    @property
    def latest_day(self) -> int | None:
        return max(self.usage_days) if self.usage_days else None


class UsageLedger(BaseModel):
    """
    Usage records keyed by resource name, one mapping per namespace.

    Knows nothing about limits; the cooldown manager decides what the
    counts mean.
    """
    model_config = ConfigDict(populate_by_name=True)

    event_usage: dict[str, UsageRecord] = Field(default_factory=dict, alias="eventUsage")
    command_usage: dict[str, UsageRecord] = Field(default_factory=dict, alias="commandUsage")
    buy_usage: dict[str, UsageRecord] = Field(default_factory=dict, alias="buyUsage")

    @field_validator("event_usage", "command_usage", "buy_usage", mode="before")
    @classmethod
    def _missing_namespace_is_empty(cls, value):
        # Saves from older versions carry null or omit buyUsage entirely
        return {} if value is None else value

    def records(self, namespace: UsageNamespace) -> dict[str, UsageRecord]:
        """Get the mapping backing a namespace."""
        if namespace == UsageNamespace.EVENT:
            return self.event_usage
        if namespace == UsageNamespace.COMMAND:
            return self.command_usage
        return self.buy_usage

    def get(self, namespace: UsageNamespace, key: str) -> UsageRecord | None:
        """Look up a record without creating it."""
        return self.records(namespace).get(key)

    def get_or_create(self, namespace: UsageNamespace, key: str) -> UsageRecord:
        """Return the record for key, creating an empty one on first use."""
        records = self.records(namespace)
        if key not in records:
            records[key] = UsageRecord(key=key)
        return records[key]

    def uses(self, namespace: UsageNamespace, key: str) -> int:
        """Current period uses for key, 0 if it has never been used."""
        record = self.get(namespace, key)
        return record.current_period_uses if record else 0

    def total_uses(self, namespace: UsageNamespace) -> int:
        """Sum of current period uses across a namespace."""
        return sum(r.current_period_uses for r in self.records(namespace).values())

    @staticmethod
    def prune(record: UsageRecord, window_days: int, today: int) -> int:
        """
        Drop entries older than the cooldown window.

        An entry expires once more than window_days have passed since it
        was recorded. A window of 0 means entries never expire.

        Returns the number of entries removed.
        """
        if window_days == 0:
            return 0
        before = len(record.usage_days)
        record.usage_days[:] = [d for d in record.usage_days if (today - d) <= window_days]
        return before - len(record.usage_days)

    @staticmethod
    def record_use(record: UsageRecord, today: int) -> None:
        """Append a use. Repeat uses on the same day each count."""
        record.usage_days.append(today)


class CooldownState(BaseModel):
    """Ledger plus the bookkeeping the daily sweep needs."""
    model_config = ConfigDict(populate_by_name=True)

    data: UsageLedger = Field(default_factory=UsageLedger, alias="globalCooldownData")
    last_cleanup_day: int = Field(default=0, alias="lastCleanupDay")

    @field_validator("data", mode="before")
    @classmethod
    def _missing_data_is_empty(cls, value):
        return UsageLedger() if value is None else value


# -----------------------------------------------------------------------------
# Policy
# -----------------------------------------------------------------------------

class CooldownSettings(BaseModel):
    """
    Global cooldown limits, edited in the mod settings screen.

    Every cap uses 0 for "unlimited".
    """
    event_cooldowns_enabled: bool = True
    event_cooldown_days: int = Field(default=5, ge=0)   # Window length; 0 = never expire
    events_per_cooldown: int = Field(default=0, ge=0)   # Total across categories
    max_good_events: int = Field(default=10, ge=0)
    max_bad_events: int = Field(default=3, ge=0)
    max_neutral_events: int = Field(default=10, ge=0)
    max_item_purchases: int = Field(default=50, ge=0)


class CommandSettings(BaseModel):
    """Per-command limits. Owned by each command's settings entry."""
    enabled: bool = True
    cost: int = 0
    use_event_cooldown: bool = False
    max_uses_per_cooldown_period: int = Field(default=0, ge=0)  # 0 = unlimited
    respects_global_event_cooldown: bool = True


# -----------------------------------------------------------------------------
# Save root
# -----------------------------------------------------------------------------

class SaveMeta(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4())[:8])
    name: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class CooldownSave(BaseModel):
    """
    Cooldown data for one game save.

    This is the root model that gets serialized to JSON.
    """
    schema_version: str = "1.1.0"  # Added buyUsage
    saved_at: datetime = Field(default_factory=datetime.now)

    meta: SaveMeta
    cooldowns: CooldownState = Field(default_factory=CooldownState)

    def save_checkpoint(self) -> None:
        """Update timestamp before save."""
        self.saved_at = datetime.now()
        self.meta.updated_at = datetime.now()
