"""
Pytest fixtures for cooldown tests.

Provides in-memory stores, a settable clock and a bound cooldown manager.
"""

import pytest
from pathlib import Path

# Add project root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rics_cooldowns.state import (
    CommandSettings,
    CooldownSettings,
    CooldownState,
    FixedClock,
    MemoryCooldownStore,
    SaveManager,
    reset_event_bus,
)
from rics_cooldowns.systems import GlobalCooldownManager


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Each test gets its own event bus."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def clock():
    """Clock parked on day 10."""
    return FixedClock(10)


@pytest.fixture
def state():
    return CooldownState()


@pytest.fixture
def cooldowns(state, clock):
    """Cooldown manager over an empty ledger."""
    return GlobalCooldownManager(state, clock)


@pytest.fixture
def settings():
    """Default global limits: 5-day window, good 10 / bad 3 / neutral 10."""
    return CooldownSettings()


@pytest.fixture
def raid_settings():
    """Raid limited to 2 uses per window, counting against bad events."""
    return CommandSettings(
        use_event_cooldown=True,
        max_uses_per_cooldown_period=2,
        respects_global_event_cooldown=True,
    )


@pytest.fixture
def memory_store():
    """In-memory save store for testing."""
    return MemoryCooldownStore()


@pytest.fixture
def manager(memory_store, clock, settings):
    """Save manager with in-memory store."""
    return SaveManager(memory_store, clock, settings=settings)
