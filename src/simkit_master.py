"""
GolfSim Toolkit Master

Operator entry point for the GolfSim maintenance toolkit.
Provides a menu of maintenance modules, or clears the cache folders
unattended when started by the boot task in startup mode.
"""

import argparse
import os
import sys
import time
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence

from simkit_config import OperationMode, ToolkitContext, load_config
from simkit_elevation import Elevation, check_elevation, relaunch_elevated
from simkit_loader import invoke_module, query_status
from simkit_log import configure_logging, logger, status
from simkit_prompt import Reader, confirm, pause, safe_input
from simkit_registry import (
    CLEAR_CACHE_MODULE,
    REGISTRY,
    ModuleDescriptor,
    group_by_category,
    sorted_modules,
)
from simkit_tasks import TaskScheduler


QUIT_TOKEN = "q"
INVALID_PAUSE_SECONDS = 1.5


def clear_screen() -> None:
    os.system("cls" if os.name == "nt" else "clear")


def build_selection(registry: Sequence[ModuleDescriptor]) -> Dict[str, ModuleDescriptor]:
    """Number the modules 1..N in display order."""
    return {str(i): d for i, d in enumerate(sorted_modules(registry), start=1)}


def render_menu(
    selection: Dict[str, ModuleDescriptor],
    context: ToolkitContext,
    clear: Callable[[], None] = clear_screen,
) -> None:
    clear()
    print("=" * 43)
    print("              GolfSim Toolkit")
    print("=" * 43)

    ordinals = {id(d): key for key, d in selection.items()}

    for category, modules in group_by_category(list(selection.values())):
        print()
        print(category)

        for descriptor in modules:
            print(f"  {ordinals[id(descriptor)]}) {descriptor.title}")

            try:
                summary = query_status(descriptor, context)
            except Exception as exc:
                logger.warning("Status query failed for %s: %s", descriptor.relative_path, exc)
                summary = "status unavailable"

            if summary:
                print(f"       {summary}")

    print()
    print(f"  {QUIT_TOKEN.upper()}) Quit")
    print()


def read_choice(read: Reader) -> str:
    try:
        return read("Select an option: ").strip()
    except (KeyboardInterrupt, EOFError):
        print("\n[!] Cancelled by user.")
        return QUIT_TOKEN


def run_menu(
    context: ToolkitContext,
    registry: Sequence[ModuleDescriptor] = REGISTRY,
    read: Reader = safe_input,
    clear: Callable[[], None] = clear_screen,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    while True:
        selection = build_selection(registry)

        render_menu(selection, context, clear)
        choice = read_choice(read)

        if choice.lower() == QUIT_TOKEN:
            print("Exiting GolfSim Toolkit.")
            return 0

        if choice in selection:
            invoke_module(selection[choice], context, confirm=partial(confirm, read=read))
            pause(read)
            continue

        print("[!] Invalid selection.")
        sleep(INVALID_PAUSE_SECONDS)


def run_startup(context: ToolkitContext) -> int:
    """Clear the cache folders without prompting."""

    status("*", "Startup mode: clearing cache folders")
    result = invoke_module(CLEAR_CACHE_MODULE, context)
    return 0 if result.ok else 1


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="simkit",
        description="Maintenance toolkit for the GolfSim simulator suite.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in OperationMode],
        default=OperationMode.INTERACTIVE.value,
        help="interactive menu (default) or unattended startup clearing",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, scheduler: Optional[TaskScheduler] = None) -> int:
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(raw_argv)
    mode = OperationMode(args.mode)

    config = load_config()
    log_path = configure_logging(config.log_dir)
    logger.info("GolfSim Toolkit started in %s mode (log: %s)", mode.value, log_path)

    entry_script = os.path.abspath(config.entry_script)
    if not os.path.isfile(entry_script):
        status("X", f"Cannot determine the toolkit location: {config.entry_script}")
        return 1

    if check_elevation() is Elevation.NOT_ELEVATED:
        if mode is OperationMode.STARTUP:
            status("X", "Administrator privileges are required")
            return 1

        status("!", "Administrator privileges are required, relaunching elevated...")
        if relaunch_elevated(entry_script, raw_argv):
            return 0

        status("X", "Could not obtain administrator privileges")
        return 1

    context = ToolkitContext(config=config, scheduler=scheduler or TaskScheduler(), mode=mode)

    if mode is OperationMode.STARTUP:
        return run_startup(context)

    return run_menu(context)


if __name__ == "__main__":
    raise SystemExit(main())
