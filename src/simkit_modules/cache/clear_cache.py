"""Empties the simulator Cache, Temp and VideoManagement folders."""

from simkit_cache import ClearStatus, clear_folders
from simkit_errors import OperationFailure
from simkit_modules import MaintenanceModule


class Module(MaintenanceModule):

    def confirmation_text(self) -> str:
        lines = ["The contents of these folders will be deleted:"]
        lines.extend(f"  - {path}" for path in self.config.cache_folders)
        return "\n".join(lines)

    def run(self) -> None:
        results = clear_folders(self.config.cache_folders)

        failed = [r for r in results if r.status is ClearStatus.FAILED]
        if failed:
            raise OperationFailure(f"{len(failed)} folder(s) could not be fully cleared")
