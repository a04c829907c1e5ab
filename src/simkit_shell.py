"""
GolfSim Toolkit Shell

Runs PowerShell commands for the scheduled task and touch hardware collectors.
"""

import json
import subprocess
from typing import Any, List, Optional

from simkit_errors import OperationFailure


POWERSHELL_EXE = "powershell.exe"


def ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + str(value).replace("'", "''") + "'"


def build_powershell_command(script: str) -> List[str]:
    return [
        POWERSHELL_EXE,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy", "Bypass",
        "-Command", "$ErrorActionPreference = 'Stop'; " + script,
    ]


def run_powershell(script: str, label: str) -> str:
    """Execute a PowerShell command and return its trimmed output."""

    cmd = build_powershell_command(script)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as exc:
        raise OperationFailure(f"{label}: could not start PowerShell ({exc})") from exc

    if result.returncode != 0:
        detail = (result.stderr or "").strip().splitlines()
        reason = detail[0] if detail else f"exit code {result.returncode}"
        raise OperationFailure(f"{label} failed: {reason}")

    return (result.stdout or "").strip()


def run_powershell_json(script: str, label: str) -> Optional[Any]:
    """Execute a PowerShell command and parse its JSON output, None when silent."""

    stdout = run_powershell(script, label)
    if not stdout:
        return None

    try:
        return json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise OperationFailure(f"{label} returned invalid JSON") from exc
