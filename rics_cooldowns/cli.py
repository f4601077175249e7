"""
Command-line inspection of cooldown saves.

Usage:
    python -m rics_cooldowns list
    python -m rics_cooldowns status <save> --day 42
    python -m rics_cooldowns check <save> raid --day 42
    python -m rics_cooldowns cleanup <save> --day 42

The game calendar is not available outside the game, so commands that
look at "today" take it from --day.
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import ModSettings, load_settings
from .state import FixedClock, SaveManager, UsageNamespace
from .systems.cooldowns import category_cap
from .systems.messages import check_command, cooldown_summary, days_until_reset

logger = logging.getLogger(__name__)

console = Console()

THEME = {
    "ok": "green",
    "denied": "dark_red",
    "accent": "cyan",
    "dim": "dim",
}


def _open(args: argparse.Namespace) -> tuple[SaveManager, ModSettings] | None:
    settings = load_settings(args.saves_dir)
    manager = SaveManager(
        args.saves_dir,
        FixedClock(args.day),
        settings=settings.global_settings,
        command_event_types=settings.command_event_types,
    )
    if manager.load_save(args.save) is None:
        console.print(f"[{THEME['denied']}]Save not found: {args.save}[/{THEME['denied']}]")
        return None
    return manager, settings


def cmd_list(args: argparse.Namespace) -> int:
    """List all saves."""
    manager = SaveManager(args.saves_dir, FixedClock(0))
    saves = manager.list_saves()

    if not saves:
        console.print(f"[{THEME['dim']}]No saves found[/{THEME['dim']}]")
        return 0

    table = Table(title="Saves")
    table.add_column("#", style="dim")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Last Cleanup")

    for i, s in enumerate(saves, 1):
        table.add_row(str(i), s["id"], s["name"], f"day {s['last_cleanup_day']}")

    console.print(table)
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show usage per namespace for a save."""
    opened = _open(args)
    if opened is None:
        return 1
    manager, settings = opened
    cooldowns = manager.cooldowns
    window = settings.global_settings.event_cooldown_days

    table = Table(title=f"{manager.current.meta.name} - day {args.day}")
    table.add_column("Kind", style="dim")
    table.add_column("Key")
    table.add_column("Uses")
    table.add_column("Cap")
    table.add_column("Frees in")

    for namespace in UsageNamespace:
        for key, record in sorted(cooldowns.data.records(namespace).items()):
            if namespace == UsageNamespace.EVENT:
                cap = category_cap(key, settings.global_settings)
            elif namespace == UsageNamespace.COMMAND:
                cap = settings.command(key).max_uses_per_cooldown_period
            else:
                cap = settings.global_settings.max_item_purchases
            frees_in = days_until_reset(record, window, args.day)
            table.add_row(
                namespace.value,
                key,
                str(record.current_period_uses),
                str(cap) if cap else "∞",
                "-" if frees_in is None else f"{frees_in}d",
            )

    console.print(table)
    summary = cooldown_summary(cooldowns, settings.global_settings)
    if summary:
        console.print(f"[{THEME['accent']}]{summary}[/{THEME['accent']}]")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check whether a command may run. Exit code 0 if allowed."""
    opened = _open(args)
    if opened is None:
        return 1
    manager, settings = opened

    allowed, reason = check_command(
        manager.cooldowns,
        args.command,
        settings.command(args.command),
        settings.global_settings,
    )
    if allowed:
        console.print(f"[{THEME['ok']}]✅ {args.command} is available[/{THEME['ok']}]")
        return 0

    console.print(f"[{THEME['denied']}]{reason}[/{THEME['denied']}]")
    return 1


def cmd_cleanup(args: argparse.Namespace) -> int:
    """Load a save (which sweeps expired uses) and write it back."""
    opened = _open(args)
    if opened is None:
        return 1
    manager, _ = opened

    manager.save()
    console.print(f"[{THEME['accent']}]Cleaned and saved[/{THEME['accent']}]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rics_cooldowns",
        description="Inspect chat cooldown saves",
    )
    parser.add_argument(
        "--saves-dir",
        type=Path,
        default=Path("saves"),
        help="Directory holding saves and .rics_settings.json",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="action", required=True)

    sub.add_parser("list", help="List saves").set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("status", cmd_status, "Show usage for a save"),
        ("cleanup", cmd_cleanup, "Prune expired uses and save"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("save", help="Save ID, prefix, or list index")
        p.add_argument("--day", type=int, required=True, help="Current in-game day")
        p.set_defaults(func=func)

    p = sub.add_parser("check", help="Check whether a command may run")
    p.add_argument("save", help="Save ID, prefix, or list index")
    p.add_argument("command", help="Command name, e.g. raid")
    p.add_argument("--day", type=int, required=True, help="Current in-game day")
    p.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
