"""
GolfSim Toolkit Registry

Static list of maintenance modules shown in the operator menu.
"""

from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, List, Sequence, Tuple


MODULES_ROOT = "simkit_modules"
FALLBACK_CATEGORY = "General"


def derive_category(relative_path: str) -> str:
    """Return the path segment right below the modules root, title-cased."""

    parts = [p for p in relative_path.replace("\\", "/").split("/") if p]

    if MODULES_ROOT in parts:
        parts = parts[parts.index(MODULES_ROOT) + 1:]

    # The last part is the module file itself.
    if len(parts) < 2:
        return FALLBACK_CATEGORY

    return parts[0].replace("_", " ").title()


@dataclass(frozen=True)
class ModuleDescriptor:
    relative_path: str
    title: str

    @property
    def category(self) -> str:
        return derive_category(self.relative_path)


REGISTRY: Tuple[ModuleDescriptor, ...] = (
    ModuleDescriptor("simkit_modules/cache/clear_cache.py", "Clear Cache Folders"),
    ModuleDescriptor("simkit_modules/cache/startup_clearing.py", "Startup Cache Clearing"),
    ModuleDescriptor("simkit_modules/settings/reset_settings.py", "Reset User Settings"),
    ModuleDescriptor("simkit_modules/touch/reset_touch.py", "Reset Touch Calibration"),
)

CLEAR_CACHE_MODULE = REGISTRY[0]


def sorted_modules(registry: Iterable[ModuleDescriptor]) -> List[ModuleDescriptor]:
    """Order modules by category, then title."""
    return sorted(registry, key=lambda d: (d.category.lower(), d.title.lower()))


def group_by_category(
    modules: Sequence[ModuleDescriptor],
) -> List[Tuple[str, List[ModuleDescriptor]]]:
    return [(category, list(items)) for category, items in groupby(modules, key=lambda d: d.category)]
