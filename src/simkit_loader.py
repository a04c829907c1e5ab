"""
GolfSim Toolkit Loader

Resolves a registry entry to its module file, builds a fresh module
instance, applies the confirmation gate and runs it. Failures raised by a
module never leave this boundary.
"""

import importlib
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from simkit_config import SCRIPT_DIR, ToolkitContext
from simkit_errors import ContractViolation
from simkit_log import status
from simkit_registry import ModuleDescriptor


logger = logging.getLogger("simkit.loader")

Confirm = Callable[[str], bool]


class Outcome(Enum):
    SKIPPED_NOT_FOUND = "skipped_not_found"
    SKIPPED_NO_CONFIRM = "skipped_no_confirm"
    RAN_SUCCESS = "ran_success"
    RAN_FAILURE = "ran_failure"


@dataclass(frozen=True)
class ModuleResult:
    outcome: Outcome
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.RAN_SUCCESS


def _path_parts(relative_path: str):
    return [p for p in relative_path.replace("\\", "/").split("/") if p]


def resolve_module_path(descriptor: ModuleDescriptor, modules_root: str = SCRIPT_DIR) -> str:
    """Return the absolute path of a module file."""
    return os.path.normpath(
        os.path.join(os.path.abspath(modules_root), *_path_parts(descriptor.relative_path))
    )


def module_import_name(descriptor: ModuleDescriptor) -> str:
    parts = _path_parts(descriptor.relative_path)
    parts[-1] = os.path.splitext(parts[-1])[0]
    return ".".join(parts)


def load_module(
    descriptor: ModuleDescriptor,
    context: ToolkitContext,
    modules_root: str = SCRIPT_DIR,
):
    """Import a module file and return a new instance of its Module class."""

    name = module_import_name(descriptor)
    code = importlib.import_module(name)

    expected = resolve_module_path(descriptor, modules_root)
    loaded = os.path.abspath(getattr(code, "__file__", "") or "")
    if os.path.normcase(os.path.realpath(loaded)) != os.path.normcase(os.path.realpath(expected)):
        raise ContractViolation(f"{name} was imported from {loaded}, expected {expected}")

    factory = getattr(code, "Module", None)
    if not callable(factory):
        raise ContractViolation(f"{name} does not define a Module class")

    handle = factory(context)
    if not callable(getattr(handle, "run", None)):
        raise ContractViolation(f"{name} has no run() entry point")

    return handle


def query_status(
    descriptor: ModuleDescriptor,
    context: ToolkitContext,
    modules_root: str = SCRIPT_DIR,
) -> Optional[str]:
    """Return a module's one-line state summary, if it offers one."""

    handle = load_module(descriptor, context, modules_root)
    provider = getattr(handle, "status_text", None)
    return provider() if callable(provider) else None


def invoke_module(
    descriptor: ModuleDescriptor,
    context: ToolkitContext,
    confirm: Optional[Confirm] = None,
    modules_root: str = SCRIPT_DIR,
) -> ModuleResult:
    """Load and run one module. Without a confirm callback no prompt is shown."""

    path = resolve_module_path(descriptor, modules_root)
    if not os.path.isfile(path):
        status("!", f"Module not found: {path}")
        return ModuleResult(Outcome.SKIPPED_NOT_FOUND, path)

    print()
    status("*", descriptor.title)
    print("=" * 60)

    try:
        handle = load_module(descriptor, context, modules_root)
    except ContractViolation as exc:
        status("X", f"Contract violation: {exc}")
        return ModuleResult(Outcome.RAN_FAILURE, f"Contract violation: {exc}")
    except Exception as exc:
        logger.exception("Module load failed: %s", descriptor.relative_path)
        status("X", f"Failed to load module: {exc}")
        return ModuleResult(Outcome.RAN_FAILURE, f"Failed to load module: {exc}")

    try:
        if confirm is not None:
            provider = getattr(handle, "confirmation_text", None)
            text = provider() if callable(provider) else None

            if text and not confirm(text):
                status("!", "Not confirmed. Nothing was changed.")
                return ModuleResult(Outcome.SKIPPED_NO_CONFIRM)

        handle.run()
    except KeyboardInterrupt:
        print()
        status("!", "Cancelled by user.")
        return ModuleResult(Outcome.RAN_FAILURE, "Cancelled by user")
    except Exception as exc:
        logger.exception("Module run failed: %s", descriptor.relative_path)
        print("=" * 60)
        status("X", f"Failed: {descriptor.title} ({exc})")
        return ModuleResult(Outcome.RAN_FAILURE, str(exc))

    print("=" * 60)
    status("+", f"Finished: {descriptor.title}")
    print()

    return ModuleResult(Outcome.RAN_SUCCESS)
