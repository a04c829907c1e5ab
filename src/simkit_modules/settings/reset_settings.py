"""Removes the per-user simulator settings and the machine settings file."""

import os
import shutil
from typing import List

from simkit_errors import OperationFailure
from simkit_log import status
from simkit_modules import MaintenanceModule


class Module(MaintenanceModule):

    def targets(self) -> List[str]:
        return [*self.config.user_settings_dirs, self.config.machine_settings_file]

    def confirmation_text(self) -> str:
        lines = ["Simulator settings will be reset to defaults. These will be deleted:"]
        lines.extend(f"  - {path}" for path in self.targets())
        return "\n".join(lines)

    def run(self) -> None:
        failures: List[str] = []

        for path in self.targets():
            if not os.path.exists(path):
                status("*", f"Not found, skipped: {path}")
                continue

            try:
                if os.path.isdir(path) and not os.path.islink(path):
                    shutil.rmtree(path)
                else:
                    os.remove(path)
            except OSError as exc:
                status("X", f"Could not remove {path}: {exc}")
                failures.append(path)
                continue

            status("+", f"Removed: {path}")

        if failures:
            raise OperationFailure(f"{len(failures)} settings location(s) could not be removed")
