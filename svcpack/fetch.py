"""Downloads the packages of a pack into the workspace."""

from pathlib import Path

from svcpack.context import PackContext
from svcpack.errors import Cancelled, ClientError, FetchError, UnsupportedCapability
from svcpack.package_id import PackageIdentity, PackageSet


class FetchOrchestrator:
    """Downloads the main package, then its dependencies once confirmed.

    Each step is one batch call to the package service so what the user
    confirmed is exactly what gets downloaded.
    """

    def __init__(self, context: PackContext):
        self.context = context

    def _download(self, packages: PackageSet, directory: Path) -> list[Path]:
        self.context.log.debug(f"download+ {packages.package_ids()} {directory}")
        try:
            files = self.context.client.download(packages, Path(directory))
        except (ClientError, UnsupportedCapability, OSError) as e:
            raise FetchError(f"Failed to download: {e}") from e

        # every requested package needs at least one file in the workspace
        if len(files) < len(packages):
            raise FetchError(
                f"Downloaded {len(files)} files for {len(packages)} packages: "
                f"{packages.package_ids()}"
            )
        missing = [str(f) for f in files if not Path(f).is_file()]
        if missing:
            raise FetchError(f"Downloaded files missing from the workspace: {missing}")
        return files

    def fetch_primary(self, identity: PackageIdentity, directory: Path) -> list[Path]:
        return self._download(PackageSet([identity]), directory)

    def fetch_dependencies(self, packages: PackageSet, directory: Path) -> list[Path]:
        """Download the dependencies after the user agreed

        Raises:
            Cancelled: the user declined
            FetchError: downloading failed
        """
        if len(packages) == 0:
            return []

        console = self.context.console
        for identity in packages:
            console.print(str(identity))

        if not console.get_prompt("Okay to download the additional packages", True):
            console.print("Cancelled!")
            raise Cancelled("Download of the additional packages declined")

        return self._download(packages, directory)

    def fetch(
        self, identity: PackageIdentity, packages: PackageSet, directory: Path
    ) -> list[Path]:
        """Download the main package and its dependencies into directory"""
        files = self.fetch_primary(identity, directory)
        files += self.fetch_dependencies(packages, directory)
        return files
