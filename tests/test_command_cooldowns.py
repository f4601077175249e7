"""
Tests for chat command cooldowns.

A command passes two gates: its own per-window cap, then the global
event cap of the category it maps to.
"""

from rics_cooldowns.state import CommandSettings, CooldownSettings, UsageNamespace
from rics_cooldowns.systems import GlobalCooldownManager


class TestCommandCategoryMapping:
    """Test command -> event category lookup."""

    def test_default_table(self, cooldowns):
        assert cooldowns.event_type_for_command("raid") == "bad"
        assert cooldowns.event_type_for_command("militaryaid") == "good"
        assert cooldowns.event_type_for_command("weather") == "neutral"

    def test_unknown_command_is_neutral(self, cooldowns):
        assert cooldowns.event_type_for_command("dance") == "neutral"

    def test_case_insensitive(self, cooldowns):
        assert cooldowns.event_type_for_command("RAID") == "bad"
        assert cooldowns.event_type_for_command("MilitaryAid") == "good"

    def test_custom_table(self, state, clock):
        """The table can be replaced without touching the manager."""
        cooldowns = GlobalCooldownManager(
            state, clock, command_event_types={"Meteor": "doom"},
        )
        assert cooldowns.event_type_for_command("meteor") == "doom"
        assert cooldowns.event_type_for_command("raid") == "neutral"


class TestPerCommandCap:
    """Test the command's own cap."""

    def test_allows_until_cap(self, cooldowns, raid_settings):
        settings = CooldownSettings(max_bad_events=0)
        assert cooldowns.can_use_command("raid", raid_settings, settings)
        cooldowns.record_command_use("raid")
        assert cooldowns.can_use_command("raid", raid_settings, settings)
        cooldowns.record_command_use("raid")

        assert cooldowns.can_use_command("raid", raid_settings, settings) is False

    def test_exhausted_cap_short_circuits_global(self, cooldowns):
        """Command cap denies even when the global category has room."""
        command = CommandSettings(
            use_event_cooldown=True,
            max_uses_per_cooldown_period=1,
            respects_global_event_cooldown=False,
        )
        settings = CooldownSettings(max_bad_events=10)
        cooldowns.record_command_use("raid")

        assert cooldowns.can_use_event("bad", settings)
        assert cooldowns.can_use_command("raid", command, settings) is False

    def test_cap_ignored_when_flag_off(self, cooldowns):
        command = CommandSettings(
            use_event_cooldown=False,
            max_uses_per_cooldown_period=1,
            respects_global_event_cooldown=False,
        )
        cooldowns.record_command_use("raid")
        cooldowns.record_command_use("raid")
        assert cooldowns.can_use_command("raid", command, CooldownSettings())

    def test_zero_cap_is_unlimited(self, cooldowns):
        command = CommandSettings(
            use_event_cooldown=True,
            max_uses_per_cooldown_period=0,
            respects_global_event_cooldown=False,
        )
        for _ in range(50):
            cooldowns.record_command_use("weather")
        assert cooldowns.can_use_command("weather", command, CooldownSettings())
        assert cooldowns.data.get(UsageNamespace.COMMAND, "weather").current_period_uses == 50

    def test_cap_uses_global_window(self, cooldowns, clock, raid_settings):
        settings = CooldownSettings(event_cooldown_days=2, max_bad_events=0)
        cooldowns.record_command_use("raid")
        cooldowns.record_command_use("raid")
        assert not cooldowns.can_use_command("raid", raid_settings, settings)

        clock.advance(3)
        assert cooldowns.can_use_command("raid", raid_settings, settings)


class TestGlobalGate:
    """Test the event-category gate for commands."""

    def test_category_cap_applies(self, cooldowns):
        command = CommandSettings()  # no own cap, respects global
        settings = CooldownSettings(max_bad_events=1)
        cooldowns.record_event_use("bad")

        assert cooldowns.can_use_command("raid", command, settings) is False
        assert cooldowns.can_use_command("militaryaid", command, settings) is True

    def test_skipped_when_cooldowns_disabled(self, cooldowns):
        command = CommandSettings()
        settings = CooldownSettings(max_bad_events=1, event_cooldowns_enabled=False)
        cooldowns.record_event_use("bad")

        assert cooldowns.can_use_command("raid", command, settings) is True

    def test_skipped_when_command_opts_out(self, cooldowns):
        command = CommandSettings(respects_global_event_cooldown=False)
        settings = CooldownSettings(max_bad_events=1)
        cooldowns.record_event_use("bad")

        assert cooldowns.can_use_command("raid", command, settings) is True

    def test_total_cap_applies(self, cooldowns):
        command = CommandSettings()
        settings = CooldownSettings(events_per_cooldown=2)
        cooldowns.record_event_use("good")
        cooldowns.record_event_use("good")

        assert cooldowns.can_use_command("weather", command, settings) is False

    def test_both_gates_pass(self, cooldowns, raid_settings):
        settings = CooldownSettings(max_bad_events=3)
        cooldowns.record_command_use("raid", also_record_category=True)
        assert cooldowns.can_use_command("raid", raid_settings, settings)

    def test_both_gates_skipped(self, cooldowns):
        command = CommandSettings(respects_global_event_cooldown=False)
        assert cooldowns.can_use_command("anything", command, CooldownSettings())
        assert cooldowns.data.command_usage == {}


class TestRecordCommandUse:
    """Test command recording and the optional category bookkeeping."""

    def test_command_only_by_default(self, cooldowns):
        cooldowns.record_command_use("raid")

        assert cooldowns.data.uses(UsageNamespace.COMMAND, "raid") == 1
        assert cooldowns.data.uses(UsageNamespace.EVENT, "bad") == 0

    def test_also_record_category(self, cooldowns):
        cooldowns.record_command_use("raid", also_record_category=True)

        assert cooldowns.data.uses(UsageNamespace.COMMAND, "raid") == 1
        assert cooldowns.data.uses(UsageNamespace.EVENT, "bad") == 1

    def test_category_recording_counts_against_other_commands(self, cooldowns):
        """A weather use fills the neutral cap shared with unmapped commands."""
        settings = CooldownSettings(max_neutral_events=1)
        cooldowns.record_command_use("weather", also_record_category=True)

        assert not cooldowns.can_use_command("dance", CommandSettings(), settings)
