"""
Package resolution logic

This module handles:
- Turning a package reference (package id, name or capability) into
  exactly one package id
- Asking the user to pick one when several packages match
- Collecting the runtime dependency closure of the resolved package
"""

from svcpack.client import Role
from svcpack.context import PackContext
from svcpack.errors import (
    ClientError,
    DependencyQueryError,
    ResolutionError,
    UnsupportedCapability,
)
from svcpack.package_id import PackageIdentity, PackageSet


def check_capabilities(context: PackContext) -> None:
    """Fail early when the package service cannot list dependencies

    Without a dependency query a pack would only hold the main package,
    which is useless for offline installation.
    """
    try:
        supported = context.client.supports(Role.GET_DEPENDS)
    except ClientError as e:
        raise DependencyQueryError(f"Failed to query service roles: {e}") from e

    if not supported:
        raise DependencyQueryError(
            "Please use a package service that supports get-depends"
        )


class IdentityResolver:
    """Resolves a package reference to one package id"""

    def __init__(self, context: PackContext):
        self.context = context

    def resolve(self, reference: str, filter: str) -> PackageIdentity:
        """
        Resolve a package reference.

        A complete package id is returned as is without asking the
        service. Otherwise the reference is looked up by name and, failing
        that, as a capability some package provides. When several packages
        match the user picks one.

        Args:
            reference: Package id, package name or provided capability
            filter: Filter passed to the service

        Returns:
            The resolved package identity

        Raises:
            ResolutionError: nothing matched or the service failed
        """
        if PackageIdentity.check(reference):
            return PackageIdentity.from_string(reference)

        log = self.context.log
        client = self.context.client

        try:
            candidates = client.resolve(reference, filter)
        except (ClientError, UnsupportedCapability) as e:
            raise ResolutionError(f"Resolve failed: {e}") from e
        log.debug(f"Resolved {reference!r} to {len(candidates)} packages")

        # didn't resolve to anything, try to get a provide
        if len(candidates) == 0:
            try:
                candidates = client.what_provides(reference, filter)
            except UnsupportedCapability as e:
                raise ResolutionError(
                    f"Could not find a package named {reference!r} and "
                    "what-provides is not supported by the package service"
                ) from e
            except ClientError as e:
                raise ResolutionError(f"What-provides failed: {e}") from e
            log.debug(f"{len(candidates)} packages provide {reference!r}")

        if len(candidates) == 0:
            raise ResolutionError(f"Could not find a package match for {reference!r}")

        if len(candidates) == 1:
            return candidates[0]

        return self._select(candidates)

    def _select(self, candidates: PackageSet) -> PackageIdentity:
        console = self.context.console
        console.print("There are multiple package matches")
        for i, candidate in enumerate(candidates, start=1):
            console.print(f"{i}. {candidate.printable()}")

        number = console.get_number("Please enter the package number: ", len(candidates))
        return candidates[number - 1]


class DependencyCollector:
    """Collects the runtime dependencies of a package"""

    def __init__(self, context: PackContext):
        self.context = context

    def collect(self, identity: PackageIdentity, recursive: bool = True) -> PackageSet:
        """
        Return the dependency closure of a package in the order the service
        reported it. The package itself is never part of the result.

        Raises:
            DependencyQueryError: the query failed, a partial closure would
                produce a broken pack
        """
        self.context.log.debug(f"Getting depends for {identity}")
        try:
            depends = self.context.client.get_depends(
                identity, recursive, self.context.settings.filter
            )
        except (ClientError, UnsupportedCapability) as e:
            raise DependencyQueryError(f"Failed to get depends: {e}") from e

        depends.remove(identity)
        self.context.log.debug(f"{identity} has {len(depends)} dependencies")
        return depends
