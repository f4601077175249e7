"""
Save lifecycle for cooldown data.

Handles create, load, save, list and delete. Loading a save runs the
daily cleanup sweep, the same point where the game finishes restoring
its components.
"""

import logging
from pathlib import Path

from .clock import GameClock
from .event_bus import EventType, get_event_bus
from .schema import CooldownSave, CooldownSettings, SaveMeta
from .store import CooldownStore, JsonCooldownStore

logger = logging.getLogger(__name__)


class SaveManager:
    """
    Owns the current save and the cooldown manager bound to it.

    Storage is delegated to a CooldownStore implementation:
    - JsonCooldownStore for production (file-based)
    - MemoryCooldownStore for testing (in-memory)
    """

    def __init__(
        self,
        store: CooldownStore | Path | str,
        clock: GameClock,
        settings: CooldownSettings | None = None,
        command_event_types: dict[str, str] | None = None,
    ):
        """
        Args:
            store: CooldownStore instance, or path for JsonCooldownStore
            clock: Source of the current in-game day
            settings: Global cooldown limits (defaults if omitted)
            command_event_types: Override for the command-to-category table
        """
        if isinstance(store, (Path, str)):
            store = JsonCooldownStore(store)
        self.store = store
        self.clock = clock
        self.settings = settings or CooldownSettings()
        self.command_event_types = command_event_types

        self.current: CooldownSave | None = None
        self._cooldown_system = None

    @property
    def cooldowns(self):
        """Cooldown manager for the current save (lazy initialization)."""
        if self.current is None:
            return None
        if self._cooldown_system is None:
            from ..systems.cooldowns import GlobalCooldownManager
            self._cooldown_system = GlobalCooldownManager(
                self.current.cooldowns,
                self.clock,
                command_event_types=self.command_event_types,
                save_id=self.current.meta.id,
            )
        return self._cooldown_system

    def _set_current(self, save: CooldownSave | None) -> None:
        self.current = save
        self._cooldown_system = None

    def create_save(self, name: str) -> CooldownSave:
        """Start tracking cooldowns for a new game."""
        save = CooldownSave(meta=SaveMeta(name=name))
        save.cooldowns.last_cleanup_day = self.clock.current_day()
        self._set_current(save)
        return save

    def load_save(self, save_id: str) -> CooldownSave | None:
        """
        Load a save by ID or partial match, then sweep expired uses.

        Supports:
        - Full ID: "a1b2c3d4"
        - Numeric index from list: "1", "2", etc.
        """
        if save_id.isdigit():
            saves = self.list_saves()
            idx = int(save_id) - 1
            if 0 <= idx < len(saves):
                save_id = saves[idx]["id"]

        save = self.store.load(save_id)
        if save is None:
            logger.warning(f"No save found for {save_id!r}")
            return None

        self._set_current(save)
        self.cooldowns.post_load(self.settings)

        logger.info(f"Loaded save {save.meta.name} ({save.meta.id})")
        get_event_bus().emit(
            EventType.SAVE_LOADED,
            save_id=save.meta.id,
            day=self.clock.current_day(),
        )
        return save

    def save(self) -> bool:
        """Persist the current save."""
        if not self.current:
            return False

        self.store.save(self.current)
        get_event_bus().emit(
            EventType.SAVE_SAVED,
            save_id=self.current.meta.id,
            day=self.clock.current_day(),
        )
        return True

    def delete_save(self, save_id: str) -> str | None:
        """Delete a save by ID. Returns deleted ID or None."""
        if not self.store.delete(save_id):
            return None

        if self.current and self.current.meta.id == save_id:
            self._set_current(None)
        return save_id

    def list_saves(self) -> list[dict]:
        """List all saves, newest first."""
        return self.store.list_all()
