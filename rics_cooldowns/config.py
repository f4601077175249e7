"""
Mod settings persistence.

Stores global cooldown limits, per-command settings and the
command-to-category table in a JSON file next to the saves.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .state.schema import CommandSettings, CooldownSettings
from .systems.cooldowns import COMMAND_EVENT_TYPES

logger = logging.getLogger(__name__)


class ModSettings(BaseModel):
    """Everything the settings screen edits that cooldowns read."""
    global_settings: CooldownSettings = Field(default_factory=CooldownSettings)
    commands: dict[str, CommandSettings] = Field(default_factory=dict)
    command_event_types: dict[str, str] = Field(
        default_factory=lambda: dict(COMMAND_EVENT_TYPES)
    )

    @field_validator("commands", "command_event_types")
    @classmethod
    def _lowercase_names(cls, value: dict) -> dict:
        return {name.lower(): v for name, v in value.items()}

    def command(self, name: str) -> CommandSettings:
        """Settings for a command, or defaults if it has none."""
        return self.commands.get(name.lower(), CommandSettings())


def get_settings_path(settings_dir: Path | str = "saves") -> Path:
    """Get path to settings file."""
    return Path(settings_dir) / ".rics_settings.json"


def load_settings(settings_dir: Path | str = "saves") -> ModSettings:
    """Load settings from file, or return defaults if missing or unreadable."""
    path = get_settings_path(settings_dir)

    if not path.exists():
        return ModSettings()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        return ModSettings.model_validate(saved)
    except (json.JSONDecodeError, OSError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        return ModSettings()


def save_settings(settings: ModSettings, settings_dir: Path | str = "saves") -> bool:
    """Save settings to file. Returns True on success."""
    path = get_settings_path(settings_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(settings.model_dump_json(indent=2))
        return True
    except OSError as e:
        logger.error(f"Could not write settings file {path}: {e}")
        return False
