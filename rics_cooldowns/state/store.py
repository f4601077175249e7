"""
Cooldown save storage.

Separates persistence from cooldown logic for testability.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from .schema import CooldownSave

logger = logging.getLogger(__name__)


@runtime_checkable
class CooldownStore(Protocol):
    """
    Storage interface for cooldown saves.

    Implementations:
    - JsonCooldownStore: File-based persistence (production)
    - MemoryCooldownStore: In-memory storage (testing)
    """

    def save(self, save: CooldownSave) -> None:
        """Persist a save."""
        ...

    def load(self, save_id: str) -> CooldownSave | None:
        """Load a save by ID. Returns None if not found."""
        ...

    def delete(self, save_id: str) -> bool:
        """Delete a save. Returns True if deleted."""
        ...

    def list_all(self) -> list[dict]:
        """List all saves with metadata."""
        ...

    def exists(self, save_id: str) -> bool:
        """Check if a save exists."""
        ...


class JsonCooldownStore:
    """
    File-based storage, one JSON file per save.

    Features:
    - Automatic backup on save
    - Partial ID matching on load
    """

    def __init__(self, saves_dir: Path | str = "saves"):
        self.saves_dir = Path(saves_dir)
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _save_files(self):
        # Dotfiles hold settings, not saves
        return [f for f in self.saves_dir.glob("*.json") if not f.name.startswith(".")]

    def save(self, save: CooldownSave) -> None:
        """Save to JSON file with backup."""
        save.save_checkpoint()

        save_file = self.saves_dir / f"{save.meta.id}.json"

        if save_file.exists():
            backup = save_file.with_suffix(".json.bak")
            backup.write_text(save_file.read_text(encoding="utf-8"), encoding="utf-8")

        save_file.write_text(save.model_dump_json(indent=2, by_alias=True), encoding="utf-8")

    def load(self, save_id: str) -> CooldownSave | None:
        """
        Load by ID or partial match.

        Supports:
        - Full ID: "a1b2c3d4"
        - Partial prefix: "a1b2"
        """
        save_file = self.saves_dir / f"{save_id}.json"

        if not save_file.exists():
            for f in self._save_files():
                if f.stem.startswith(save_id):
                    save_file = f
                    break

        if not save_file.exists():
            return None

        try:
            data = json.loads(save_file.read_text(encoding="utf-8"))
            return CooldownSave.model_validate(data)
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning(f"Could not read save {save_file.name}: {e}")
            return None

    def delete(self, save_id: str) -> bool:
        """Delete save file."""
        save_file = self.saves_dir / f"{save_id}.json"

        if save_file.exists():
            save_file.unlink()
            return True

        return False

    def list_all(self) -> list[dict]:
        """
        List all saves sorted by modification time.

        Returns list of dicts with: id, name, last_cleanup_day, updated_at
        """
        saves = []

        for f in sorted(
            self._save_files(),
            key=lambda x: x.stat().st_mtime,
            reverse=True,
        ):
            try:
                data = json.loads(f.read_text(encoding="utf-8"))
                meta = data.get("meta")
                if not isinstance(meta, dict):
                    continue

                updated = datetime.fromisoformat(
                    meta.get("updated_at", "2000-01-01")
                )
                cooldowns = data.get("cooldowns") or {}

                saves.append({
                    "id": meta.get("id", f.stem),
                    "name": meta.get("name", "Unnamed"),
                    "last_cleanup_day": cooldowns.get("lastCleanupDay", 0),
                    "updated_at": updated,
                })
            except (ValueError, TypeError, AttributeError, OSError):
                continue

        return saves

    def exists(self, save_id: str) -> bool:
        return (self.saves_dir / f"{save_id}.json").exists()


class MemoryCooldownStore:
    """
    In-memory storage for testing.

    Saves are kept as serialized JSON so a load returns a fresh copy,
    the same way a file round trip would.
    """

    def __init__(self):
        self.saves: dict[str, str] = {}

    def save(self, save: CooldownSave) -> None:
        save.save_checkpoint()
        self.saves[save.meta.id] = save.model_dump_json(by_alias=True)

    def load(self, save_id: str) -> CooldownSave | None:
        if save_id not in self.saves:
            for sid in self.saves:
                if sid.startswith(save_id):
                    save_id = sid
                    break
            else:
                return None

        return CooldownSave.model_validate_json(self.saves[save_id])

    def delete(self, save_id: str) -> bool:
        if save_id in self.saves:
            del self.saves[save_id]
            return True
        return False

    def list_all(self) -> list[dict]:
        saves = []

        for raw in self.saves.values():
            save = CooldownSave.model_validate_json(raw)
            saves.append({
                "id": save.meta.id,
                "name": save.meta.name,
                "last_cleanup_day": save.cooldowns.last_cleanup_day,
                "updated_at": save.meta.updated_at,
            })

        saves.sort(key=lambda x: x["updated_at"], reverse=True)
        return saves

    def exists(self, save_id: str) -> bool:
        return save_id in self.saves

    def clear(self) -> None:
        """Clear all saves (test utility)."""
        self.saves.clear()
