"""
GolfSim Toolkit Elevation

Checks for administrative privileges and relaunches the toolkit elevated.
The caller decides what to do with a NotElevated result.
"""

import ctypes
import subprocess
import sys
from enum import Enum
from typing import List

from simkit_log import status


SW_SHOWNORMAL = 1


class Elevation(Enum):
    ELEVATED = "elevated"
    NOT_ELEVATED = "not_elevated"


def is_admin() -> bool:
    """Return True if the current process has administrative privileges."""
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except Exception:
        return False


def check_elevation() -> Elevation:
    return Elevation.ELEVATED if is_admin() else Elevation.NOT_ELEVATED


def build_relaunch_parameters(script: str, argv: List[str]) -> str:
    """Quote the script path and its arguments into one command line."""
    return subprocess.list2cmdline([script, *argv])


def relaunch_elevated(script: str, argv: List[str]) -> bool:
    """Start an elevated copy of the toolkit; True if the launch was accepted."""

    params = build_relaunch_parameters(script, argv)

    try:
        rc = ctypes.windll.shell32.ShellExecuteW(
            None, "runas", sys.executable, params, None, SW_SHOWNORMAL
        )
    except Exception as exc:
        status("X", f"Elevation attempt failed: {exc}")
        return False

    # ShellExecuteW reports success with values above 32.
    return int(rc) > 32
