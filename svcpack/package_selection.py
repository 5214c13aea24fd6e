"""Package selection logic for svcpack.

This module decides which dependencies end up in a pack: packages listed
in the package list of the target system are assumed to be installed
already and are not downloaded again.
"""

import logging
from pathlib import Path

from svcpack.errors import ExclusionLoadError
from svcpack.package_id import PackageIdentity, PackageSet

log = logging.getLogger("svcpack.selection")


def parse_package_list(text: str) -> PackageSet:
    """Parse the contents of a package list.

    Every line holds one package, either as written by the package service
    ("info<TAB>package_id<TAB>summary") or as a bare package id. Blank lines
    and lines starting with "#" are ignored, malformed lines are skipped.

    Args:
        text: Contents of the package list file

    Returns:
        The listed packages in file order
    """
    packages = PackageSet()
    for number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        fields = line.split("\t")
        package_id = fields[1] if len(fields) >= 2 else fields[0]
        try:
            packages.add(PackageIdentity.from_string(package_id.strip()))
        except ValueError:
            log.warning(f"Skipping malformed package list line {number}: {line!r}")
    return packages


def load_package_list(path: Path) -> PackageSet:
    """Load a package list file

    Raises:
        ExclusionLoadError: the file does not exist or cannot be read
    """
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ExclusionLoadError(f"Failed to load package list {path}: {e}") from e
    return parse_package_list(text)


def exclude_packages(
    packages: PackageSet, package_list: Path, required: bool = False
) -> PackageSet:
    """Remove every package of the package list from packages.

    A missing package list means nothing is excluded, unless required is
    set because the user named the file explicitly. A package list that
    exists but cannot be read is always an error.

    Args:
        packages: Dependency closure to filter
        package_list: Path of the package list of the target system
        required: Fail instead of excluding nothing when the file is missing

    Returns:
        New set without the listed packages, order preserved

    Raises:
        ExclusionLoadError: the package list could not be loaded
    """
    package_list = Path(package_list)
    if not required and not package_list.exists():
        log.warning(f"Package list {package_list} not found, excluding nothing")
        return PackageSet(packages)

    installed = load_package_list(package_list)
    log.debug(f"Loaded {len(installed)} packages from {package_list}")

    remaining = PackageSet()
    for identity in packages:
        if identity in installed:
            log.debug(f"removed {identity.name}")
            continue
        remaining.add(identity)
    return remaining
