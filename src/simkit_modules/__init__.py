"""
Maintenance modules for the GolfSim Toolkit.

Each module file defines a ``Module`` class built fresh for every menu
selection. ``run`` is mandatory; ``confirmation_text`` and ``status_text``
are optional and default to None.
"""

from typing import Optional

from simkit_config import ToolkitContext


class MaintenanceModule:
    """Base for maintenance modules; subclasses provide run()."""

    def __init__(self, context: ToolkitContext):
        self.context = context
        self.config = context.config

    def confirmation_text(self) -> Optional[str]:
        return None

    def status_text(self) -> Optional[str]:
        return None
