"""
GolfSim Toolkit Errors

Exception types shared by the launcher and the maintenance modules.
"""


class SimkitError(RuntimeError):
    """Base class for toolkit failures."""


class PermissionDenied(SimkitError):
    """The process lacks the administrative rights an operation needs."""


class OperationFailure(SimkitError):
    """A clear, register or unregister call did not complete."""


class ContractViolation(SimkitError):
    """A maintenance module does not expose the mandatory entry point."""
