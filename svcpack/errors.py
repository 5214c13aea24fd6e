"""Errors raised by the pack generation stages.

Every fatal condition is a ServicePackError subclass so the pipeline
controller and the CLI can report it with a single message. Cancelled is
kept outside that hierarchy: it is a user decision, not a failure.
"""


class ServicePackError(Exception):
    """Base class for fatal pack generation errors"""


class ResolutionError(ServicePackError):
    """No package matched the reference, or resolving it failed"""


class DependencyQueryError(ServicePackError):
    """The dependency closure could not be queried"""


class ExclusionLoadError(ServicePackError):
    """The package list of already installed packages could not be loaded"""


class FetchError(ServicePackError):
    """Downloading packages into the workspace failed"""


class ArchiveError(ServicePackError):
    """The pack archive could not be written"""


class WorkspaceError(ServicePackError):
    """The scratch directory could not be created"""


class UnsupportedCapability(ServicePackError):
    """The package-management service does not offer an operation"""

    def __init__(self, role):
        self.role = role
        super().__init__(f"{role} is not supported by the package service")


class Cancelled(Exception):
    """The user declined to continue"""


class ClientError(Exception):
    """Talking to the package service failed

    Stages translate this into their own ServicePackError subclass.
    """
