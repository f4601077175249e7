"""Tests for the save inspection CLI."""

import pytest

from rics_cooldowns.cli import main
from rics_cooldowns.config import ModSettings, save_settings
from rics_cooldowns.state import (
    CommandSettings,
    CooldownSettings,
    FixedClock,
    JsonCooldownStore,
    SaveManager,
    UsageNamespace,
)


@pytest.fixture
def saves_dir(tmp_path):
    """A saves directory with one save: two raids on day 10."""
    save_settings(
        ModSettings(
            global_settings=CooldownSettings(max_bad_events=2, event_cooldown_days=5),
            commands={"raid": CommandSettings(use_event_cooldown=True, max_uses_per_cooldown_period=5)},
        ),
        tmp_path,
    )
    manager = SaveManager(tmp_path, FixedClock(10))
    manager.create_save("Colony")
    manager.cooldowns.record_command_use("raid", also_record_category=True)
    manager.cooldowns.record_command_use("raid", also_record_category=True)
    manager.save()
    return tmp_path


def run(saves_dir, *argv):
    return main(["--saves-dir", str(saves_dir), *argv])


class TestCli:

    def test_list(self, saves_dir, capsys):
        assert run(saves_dir, "list") == 0
        assert "Colony" in capsys.readouterr().out

    def test_list_empty(self, tmp_path, capsys):
        assert run(tmp_path, "list") == 0
        assert "No saves found" in capsys.readouterr().out

    def test_status(self, saves_dir, capsys):
        assert run(saves_dir, "status", "1", "--day", "11") == 0
        out = capsys.readouterr().out
        assert "raid" in out
        assert "Bad: 2/2" in out

    def test_check_denied(self, saves_dir, capsys):
        assert run(saves_dir, "check", "1", "raid", "--day", "11") == 1
        assert "BAD event limit reached" in capsys.readouterr().out

    def test_check_allowed_after_window(self, saves_dir, capsys):
        assert run(saves_dir, "check", "1", "raid", "--day", "16") == 0
        assert "available" in capsys.readouterr().out

    def test_cleanup_writes_back(self, saves_dir):
        assert run(saves_dir, "cleanup", "1", "--day", "20") == 0

        save = JsonCooldownStore(saves_dir).list_all()[0]
        assert save["last_cleanup_day"] == 20
        loaded = JsonCooldownStore(saves_dir).load(save["id"])
        assert loaded.cooldowns.data.uses(UsageNamespace.EVENT, "bad") == 0

    def test_missing_save(self, saves_dir, capsys):
        assert run(saves_dir, "status", "nope", "--day", "1") == 1
        assert "Save not found" in capsys.readouterr().out
