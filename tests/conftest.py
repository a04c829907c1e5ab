import importlib
import logging
import os
import uuid
from typing import Dict, List, Optional, Tuple

import pytest

from simkit_config import ENTRY_SCRIPT, OperationMode, ToolkitConfig, ToolkitContext
from simkit_log import LOGGER_NAME
from simkit_registry import ModuleDescriptor
from simkit_tasks import TaskDefinition, TaskInfo


class FakeScheduler:
    """In-memory stand-in for the OS task store."""

    def __init__(self):
        self.tasks: Dict[str, Tuple[TaskInfo, TaskDefinition]] = {}
        self.calls: List[Tuple[str, str]] = []

    def query(self, name: str) -> Optional[TaskInfo]:
        self.calls.append(("query", name))
        entry = self.tasks.get(name)
        return entry[0] if entry else None

    def register(self, name: str, definition: TaskDefinition) -> None:
        self.calls.append(("register", name))
        if name in self.tasks:
            raise AssertionError("register called while a task with this name exists")
        info = TaskInfo(
            name=name,
            state="Ready",
            execute=definition.execute,
            arguments=definition.arguments,
            user_id=definition.user_id,
            run_level=definition.run_level,
            execution_time_limit=f"PT{definition.execution_time_limit_minutes}M",
        )
        self.tasks[name] = (info, definition)

    def unregister(self, name: str) -> None:
        self.calls.append(("unregister", name))
        self.tasks.pop(name, None)

    def definition(self, name: str) -> TaskDefinition:
        return self.tasks[name][1]


def make_config(root, entry_script=ENTRY_SCRIPT) -> ToolkitConfig:
    vendor = os.path.join(str(root), "GolfSim")
    product = os.path.join(vendor, "Simulator")
    profile = os.path.join(str(root), "profile")
    return ToolkitConfig(
        vendor_root=vendor,
        product_dir=product,
        user_settings_dirs=(
            os.path.join(profile, "Local", "GolfSim", "Simulator"),
            os.path.join(profile, "Roaming", "GolfSim", "Simulator"),
            os.path.join(profile, "Documents", "GolfSim"),
        ),
        machine_settings_file=os.path.join(product, "MachineSettings.json"),
        entry_script=entry_script,
        python_exe=r"C:\Python312\python.exe",
        calibration_tool=os.path.join(str(root), "System32", "tabcal.exe"),
        log_dir=os.path.join(str(root), "logs"),
    )


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def context(config, scheduler):
    return ToolkitContext(config=config, scheduler=scheduler, mode=OperationMode.INTERACTIVE)


@pytest.fixture
def feed():
    """Build a read() callable that replays scripted operator answers."""

    def _feed(*answers):
        pending = list(answers)
        prompts = []

        def read(prompt):
            prompts.append(prompt)
            if not pending:
                raise AssertionError(f"unexpected prompt: {prompt!r}")
            return pending.pop(0)

        read.prompts = prompts
        return read

    return _feed


@pytest.fixture
def module_package(tmp_path, monkeypatch):
    """Create throwaway module files importable from a temporary root."""

    package = f"fakemods_{uuid.uuid4().hex[:8]}"
    base = tmp_path / "modroot"
    (base / package / "tools").mkdir(parents=True)
    (base / package / "__init__.py").write_text("")
    (base / package / "tools" / "__init__.py").write_text("")
    monkeypatch.syspath_prepend(str(base))

    def add(filename: str, source: str, title: str = "Fake Module") -> ModuleDescriptor:
        (base / package / "tools" / filename).write_text(source)
        importlib.invalidate_caches()
        return ModuleDescriptor(f"{package}/tools/{filename}", title)

    add.root = str(base)
    return add


@pytest.fixture(autouse=True)
def _detach_log_files():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()
