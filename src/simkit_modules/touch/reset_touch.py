"""
Resets touch screen calibration.

Clears the stored calibration of every display with the Windows tablet
calibration tool, then opens the tool so the operator can recalibrate.
"""

import os
import subprocess
from typing import Any, List, Tuple

from simkit_errors import OperationFailure
from simkit_log import status
from simkit_modules import MaintenanceModule
from simkit_shell import run_powershell_json


DETECT_SCRIPT = (
    "Add-Type -AssemblyName System.Windows.Forms; "
    "$touch = @(Get-CimInstance Win32_PnPEntity | "
    "Where-Object { $_.Name -match 'touch ?screen' } | "
    "ForEach-Object { [string]$_.Name }); "
    "$displays = @([System.Windows.Forms.Screen]::AllScreens | "
    "ForEach-Object { [string]$_.DeviceName }); "
    "[pscustomobject]@{ TouchDevices = $touch; Displays = $displays } | "
    "ConvertTo-Json -Compress"
)


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return [str(value)]


class Module(MaintenanceModule):

    def detect(self) -> Tuple[List[str], List[str]]:
        data = run_powershell_json(DETECT_SCRIPT, "Touch screen detection") or {}
        return _as_list(data.get("TouchDevices")), _as_list(data.get("Displays"))

    def confirmation_text(self) -> str:
        return (
            "Stored touch calibration will be cleared for every display, "
            "then the calibration tool will open."
        )

    def run(self) -> None:
        tool = self.config.calibration_tool
        if not os.path.isfile(tool):
            raise OperationFailure(f"Calibration tool not found: {tool}")

        status("*", "Detecting touch screens...")
        devices, displays = self.detect()

        if not devices:
            status("!", "No touch screen detected. Nothing to reset.")
            return

        for device in devices:
            status("+", f"Touch device: {device}")

        for display in displays:
            completed = subprocess.run([tool, "ClearCal", f"DisplayID={display}"], check=False)
            rc = int(completed.returncode or 0)

            if rc == 0:
                status("+", f"Calibration cleared: {display}")
            else:
                status("!", f"Calibration clear returned exit code {rc}: {display}")

        status("*", "Opening the calibration tool...")
        subprocess.Popen([tool])
