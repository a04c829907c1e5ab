"""
GolfSim Toolkit Scheduled Tasks

Thin wrapper over the Windows ScheduledTasks PowerShell module.
Every call goes to the OS task store; nothing is cached here.
"""

from dataclasses import dataclass
from typing import Optional

from simkit_shell import ps_quote, run_powershell, run_powershell_json


SYSTEM_ACCOUNT = "NT AUTHORITY\\SYSTEM"


@dataclass(frozen=True)
class TaskDefinition:
    execute: str
    arguments: str
    working_directory: str
    user_id: str = SYSTEM_ACCOUNT
    run_level: str = "Highest"
    trigger: str = "AtStartup"
    start_when_available: bool = True
    execution_time_limit_minutes: int = 30


@dataclass(frozen=True)
class TaskInfo:
    name: str
    state: str
    execute: str = ""
    arguments: str = ""
    user_id: str = ""
    run_level: str = ""
    execution_time_limit: str = ""


def build_query_script(name: str) -> str:
    return (
        f"$t = Get-ScheduledTask -TaskName {ps_quote(name)} -ErrorAction SilentlyContinue; "
        "if ($t) { "
        "$a = @($t.Actions)[0]; "
        "[pscustomobject]@{ "
        "TaskName = $t.TaskName; "
        "State = [string]$t.State; "
        "Execute = [string]$a.Execute; "
        "Arguments = [string]$a.Arguments; "
        "UserId = [string]$t.Principal.UserId; "
        "RunLevel = [string]$t.Principal.RunLevel; "
        "ExecutionTimeLimit = [string]$t.Settings.ExecutionTimeLimit "
        "} | ConvertTo-Json -Compress }"
    )


def build_register_script(name: str, definition: TaskDefinition) -> str:
    if definition.trigger != "AtStartup":
        raise ValueError(f"Unsupported trigger: {definition.trigger}")

    settings = "New-ScheduledTaskSettingsSet"
    if definition.start_when_available:
        settings += " -StartWhenAvailable"
    settings += (
        f" -ExecutionTimeLimit (New-TimeSpan -Minutes {int(definition.execution_time_limit_minutes)})"
    )

    return (
        "$action = New-ScheduledTaskAction"
        f" -Execute {ps_quote(definition.execute)}"
        f" -Argument {ps_quote(definition.arguments)}"
        f" -WorkingDirectory {ps_quote(definition.working_directory)}; "
        "$trigger = New-ScheduledTaskTrigger -AtStartup; "
        "$principal = New-ScheduledTaskPrincipal"
        f" -UserId {ps_quote(definition.user_id)}"
        " -LogonType ServiceAccount"
        f" -RunLevel {definition.run_level}; "
        f"$settings = {settings}; "
        f"Register-ScheduledTask -TaskName {ps_quote(name)}"
        " -Action $action -Trigger $trigger -Principal $principal -Settings $settings"
        " | Out-Null"
    )


def build_unregister_script(name: str) -> str:
    return f"Unregister-ScheduledTask -TaskName {ps_quote(name)} -Confirm:$false"


class TaskScheduler:
    """Query, register and unregister tasks by name."""

    def query(self, name: str) -> Optional[TaskInfo]:
        data = run_powershell_json(build_query_script(name), "Scheduled task query")
        if not data:
            return None

        return TaskInfo(
            name=str(data.get("TaskName") or name),
            state=str(data.get("State") or "Unknown"),
            execute=str(data.get("Execute") or ""),
            arguments=str(data.get("Arguments") or ""),
            user_id=str(data.get("UserId") or ""),
            run_level=str(data.get("RunLevel") or ""),
            execution_time_limit=str(data.get("ExecutionTimeLimit") or ""),
        )

    def register(self, name: str, definition: TaskDefinition) -> None:
        run_powershell(build_register_script(name, definition), "Scheduled task registration")

    def unregister(self, name: str) -> None:
        run_powershell(build_unregister_script(name), "Scheduled task removal")
