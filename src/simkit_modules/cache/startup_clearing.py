"""
Toggles cache clearing at system boot.

The toggle direction comes from the task store each time a handle is
built; one handle acts on the state its own confirmation showed.
"""

from typing import Optional

from simkit_cache import (
    StartupTaskState,
    disable_startup_clearing,
    enable_startup_clearing,
    query_startup_task,
)
from simkit_config import ToolkitContext
from simkit_log import status
from simkit_modules import MaintenanceModule


class Module(MaintenanceModule):

    def __init__(self, context: ToolkitContext):
        super().__init__(context)
        self.observed: Optional[StartupTaskState] = None

    def _query(self) -> StartupTaskState:
        self.observed = query_startup_task(self.context.scheduler, self.config)
        return self.observed

    def status_text(self) -> str:
        state = query_startup_task(self.context.scheduler, self.config)
        action = "disable" if state.registered else "enable"
        return f"{state.label}, select to {action}"

    def confirmation_text(self) -> str:
        state = self._query()
        name = self.config.task_name

        if state.registered:
            return (
                f"Startup cache clearing is enabled ({state.state}).\n"
                f"Remove the scheduled task '{name}'?"
            )

        return (
            "Startup cache clearing is disabled.\n"
            f"Register the scheduled task '{name}' to clear the cache folders at every boot?"
        )

    def run(self) -> None:
        state = self.observed or self._query()
        scheduler = self.context.scheduler

        if state.registered:
            if disable_startup_clearing(scheduler, self.config):
                status("+", "Startup cache clearing disabled")
            else:
                status("*", "Startup cache clearing was already disabled")
            return

        enabled = enable_startup_clearing(scheduler, self.config)
        status("+", f"Startup cache clearing enabled: {enabled.label}")
