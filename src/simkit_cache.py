"""
GolfSim Toolkit Cache

Clears the simulator cache folders and manages the scheduled task that
repeats the clearing at every system boot.

The task state is owned by the OS task store. It is queried by its fixed
name on every call and never cached here.
"""

import os
import shutil
import stat
import subprocess
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from simkit_config import ToolkitConfig
from simkit_errors import OperationFailure, SimkitError
from simkit_log import status
from simkit_tasks import TaskDefinition, TaskScheduler


class ClearStatus(Enum):
    NOT_FOUND = "not_found"
    ALREADY_EMPTY = "already_empty"
    CLEARED = "cleared"
    FAILED = "failed"


@dataclass
class FolderResult:
    path: str
    status: ClearStatus
    removed: int = 0
    errors: List[str] = field(default_factory=list)


def _clear_readonly(func, path, _exc) -> None:
    """Clear the read-only flag that blocks deletion on Windows, then retry."""
    os.chmod(path, stat.S_IWRITE)
    func(path)


def _remove_tree(path: str) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_clear_readonly)
    else:
        shutil.rmtree(path, onerror=_clear_readonly)


def _remove_entry(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        _remove_tree(path)
        return

    try:
        os.remove(path)
    except PermissionError:
        # Read-only files refuse deletion on Windows until the flag is cleared.
        os.chmod(path, stat.S_IWRITE)
        os.remove(path)


def clear_folder(path: str) -> FolderResult:
    """Delete everything inside path, keeping the folder itself."""

    if not os.path.isdir(path):
        return FolderResult(path, ClearStatus.NOT_FOUND)

    try:
        entries = sorted(os.listdir(path))
    except OSError as exc:
        return FolderResult(path, ClearStatus.FAILED, errors=[str(exc)])

    if not entries:
        return FolderResult(path, ClearStatus.ALREADY_EMPTY)

    result = FolderResult(path, ClearStatus.CLEARED)

    for name in entries:
        try:
            _remove_entry(os.path.join(path, name))
            result.removed += 1
        except OSError as exc:
            result.errors.append(f"{name}: {exc}")

    if result.errors:
        result.status = ClearStatus.FAILED

    return result


def clear_folders(paths: Iterable[str]) -> List[FolderResult]:
    """Clear each folder in turn and report one line per folder."""

    results: List[FolderResult] = []

    for path in paths:
        result = clear_folder(path)
        results.append(result)

        if result.status is ClearStatus.NOT_FOUND:
            status("*", f"Not found, skipped: {path}")
        elif result.status is ClearStatus.ALREADY_EMPTY:
            status("+", f"Already empty: {path}")
        elif result.status is ClearStatus.CLEARED:
            status("+", f"Cleared {result.removed} item(s): {path}")
        else:
            status("X", f"Could not fully clear {path} ({len(result.errors)} error(s))")
            for error in result.errors:
                print(f"    - {error}")

    return results


# ------------------------------------------------------------
# Startup task
# ------------------------------------------------------------

@dataclass(frozen=True)
class StartupTaskState:
    task_name: str
    exists: bool
    state: Optional[str] = None

    @property
    def registered(self) -> bool:
        return self.exists

    @property
    def label(self) -> str:
        if not self.exists:
            return "Disabled"
        return f"Enabled ({self.state})" if self.state else "Enabled"


def query_startup_task(scheduler: TaskScheduler, config: ToolkitConfig) -> StartupTaskState:
    info = scheduler.query(config.task_name)
    if info is None:
        return StartupTaskState(config.task_name, exists=False)
    return StartupTaskState(config.task_name, exists=True, state=info.state)


def build_task_definition(config: ToolkitConfig) -> TaskDefinition:
    """Describe the boot task that reruns this toolkit in startup mode."""

    script = os.path.abspath(config.entry_script) if config.entry_script else ""
    if not script or not os.path.isfile(script):
        raise SimkitError(f"Cannot resolve the toolkit entry script: {config.entry_script!r}")

    return TaskDefinition(
        execute=config.python_exe,
        arguments=subprocess.list2cmdline([script, "--mode", "startup"]),
        working_directory=os.path.dirname(script),
        execution_time_limit_minutes=config.task_time_limit_minutes,
    )


def enable_startup_clearing(scheduler: TaskScheduler, config: ToolkitConfig) -> StartupTaskState:
    """Register the boot task, replacing any task with the same name."""

    definition = build_task_definition(config)
    name = config.task_name

    # Not atomic: if registration fails after removal, the old task is gone.
    if scheduler.query(name) is not None:
        status("*", f"Replacing existing task '{name}'")
        try:
            scheduler.unregister(name)
        except SimkitError as exc:
            raise OperationFailure(f"Could not replace existing task '{name}': {exc}") from exc

    scheduler.register(name, definition)
    return query_startup_task(scheduler, config)


def disable_startup_clearing(scheduler: TaskScheduler, config: ToolkitConfig) -> bool:
    """Remove the boot task. Returns False when it was not registered."""

    if scheduler.query(config.task_name) is None:
        return False

    scheduler.unregister(config.task_name)
    return True
