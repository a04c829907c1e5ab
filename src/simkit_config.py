"""
GolfSim Toolkit Configuration

Resolves the simulator install tree, per-user settings locations and the
startup task identity into one explicit configuration object.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from simkit_tasks import TaskScheduler


SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))

ENTRY_SCRIPT = os.path.join(SCRIPT_DIR, "simkit_master.py")

VENDOR_NAME = "GolfSim"
PRODUCT_NAME = "Simulator"

STARTUP_TASK_NAME = "GolfSim Toolkit - Clear Cache at Startup"
STARTUP_TASK_TIME_LIMIT_MINUTES = 30


class OperationMode(Enum):
    INTERACTIVE = "interactive"
    STARTUP = "startup"


@dataclass(frozen=True)
class ToolkitConfig:
    vendor_root: str
    product_dir: str
    user_settings_dirs: Tuple[str, ...]
    machine_settings_file: str
    entry_script: str
    python_exe: str
    calibration_tool: str
    log_dir: str
    task_name: str = STARTUP_TASK_NAME
    task_time_limit_minutes: int = STARTUP_TASK_TIME_LIMIT_MINUTES

    @property
    def cache_folders(self) -> Tuple[str, ...]:
        return (
            os.path.join(self.product_dir, "Cache"),
            os.path.join(self.product_dir, "Temp"),
            os.path.join(self.vendor_root, "VideoManagement"),
        )


@dataclass
class ToolkitContext:
    """Everything a maintenance module receives at construction."""

    config: ToolkitConfig
    scheduler: TaskScheduler
    mode: OperationMode = OperationMode.INTERACTIVE


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    entry_script: Optional[str] = None,
) -> ToolkitConfig:
    """Build the configuration from the Windows environment."""

    env = os.environ if environ is None else environ

    program_data = env.get("ProgramData") or env.get("PROGRAMDATA") or r"C:\ProgramData"
    user_profile = env.get("USERPROFILE") or os.path.expanduser("~")
    local_appdata = env.get("LOCALAPPDATA") or os.path.join(user_profile, "AppData", "Local")
    roaming_appdata = env.get("APPDATA") or os.path.join(user_profile, "AppData", "Roaming")
    system_root = env.get("SystemRoot") or env.get("SYSTEMROOT") or r"C:\Windows"

    vendor_root = env.get("SIMKIT_VENDOR_ROOT") or os.path.join(program_data, VENDOR_NAME)
    product_dir = os.path.join(vendor_root, PRODUCT_NAME)

    return ToolkitConfig(
        vendor_root=vendor_root,
        product_dir=product_dir,
        user_settings_dirs=(
            os.path.join(local_appdata, VENDOR_NAME, PRODUCT_NAME),
            os.path.join(roaming_appdata, VENDOR_NAME, PRODUCT_NAME),
            os.path.join(user_profile, "Documents", VENDOR_NAME),
        ),
        machine_settings_file=os.path.join(product_dir, "MachineSettings.json"),
        entry_script=entry_script or ENTRY_SCRIPT,
        python_exe=sys.executable,
        calibration_tool=os.path.join(system_root, "System32", "tabcal.exe"),
        log_dir=env.get("SIMKIT_LOG_DIR") or os.path.join(vendor_root, "Toolkit", "Logs"),
    )
