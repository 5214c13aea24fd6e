"""
Package-management service client

The pack generator only needs four operations from the package service:
resolving names, looking up what provides a capability, querying the
dependency closure and downloading package files. Services may not offer
all of them; the roles they advertise decide which calls are allowed.
Calling an operation that is not advertised raises UnsupportedCapability.
"""

import logging
from abc import ABC, abstractmethod
from enum import StrEnum
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import requests
from pydantic import BaseModel, ValidationError

from svcpack.config import Settings
from svcpack.errors import ClientError, UnsupportedCapability
from svcpack.package_id import PackageIdentity, PackageSet

log = logging.getLogger("svcpack.client")


class Role(StrEnum):
    RESOLVE = "resolve"
    WHAT_PROVIDES = "what-provides"
    GET_DEPENDS = "get-depends"
    DOWNLOAD_PACKAGES = "download-packages"


class PackageEntry(BaseModel):
    """A package as listed by the service"""

    info: str = "unknown"
    package_id: str
    summary: str = ""


class PackageListResponse(BaseModel):
    packages: list[PackageEntry] = []


class RolesResponse(BaseModel):
    roles: list[str] = []


class DownloadedFile(BaseModel):
    filename: str
    url: str


class DownloadResponse(BaseModel):
    files: list[DownloadedFile] = []


class PackageClient(ABC):
    """Operations the pack generator consumes from the package service"""

    @abstractmethod
    def roles(self) -> frozenset[Role]:
        """Return the operations the service advertises"""

    def supports(self, role: Role) -> bool:
        return role in self.roles()

    def require(self, role: Role) -> None:
        if not self.supports(role):
            raise UnsupportedCapability(role)

    @abstractmethod
    def resolve(self, name: str, filter: str) -> PackageSet:
        """Return the packages whose name matches exactly"""

    @abstractmethod
    def what_provides(self, capability: str, filter: str) -> PackageSet:
        """Return the packages providing a capability"""

    @abstractmethod
    def get_depends(
        self, identity: PackageIdentity, recursive: bool, filter: str
    ) -> PackageSet:
        """Return the runtime dependencies of a package"""

    @abstractmethod
    def download(self, packages: PackageSet, directory: Path) -> list[Path]:
        """Download package files into directory and return their paths"""


class HttpPackageClient(PackageClient):
    """PackageClient speaking JSON over HTTP

    Args:
        settings: Settings providing upstream_url and request_timeout
        session: Optional requests session, mostly useful for testing
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.base_url = settings.upstream_url.rstrip("/") + "/"
        self.timeout = settings.request_timeout
        self.session = session or requests.Session()
        self._roles: Optional[frozenset[Role]] = None

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        log.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise ClientError(f"Request to {url} failed: {e}") from e
        return response

    def _post_json(self, path: str, payload: dict) -> dict:
        response = self._request("POST", path, json=payload)
        try:
            return response.json()
        except ValueError as e:
            raise ClientError(f"Invalid JSON from {response.url}: {e}") from e

    def _package_list(self, path: str, payload: dict) -> PackageSet:
        try:
            listing = PackageListResponse.model_validate(self._post_json(path, payload))
        except ValidationError as e:
            raise ClientError(f"Unexpected package listing from {path}: {e}") from e

        packages = PackageSet()
        for entry in listing.packages:
            try:
                identity = PackageIdentity.from_string(entry.package_id)
            except ValueError:
                log.warning(f"Skipping invalid package id {entry.package_id!r}")
                continue
            packages.add(identity)
        return packages

    def roles(self) -> frozenset[Role]:
        if self._roles is None:
            response = self._request("GET", "api/v1/roles")
            try:
                advertised = RolesResponse.model_validate(response.json()).roles
            except (ValueError, ValidationError) as e:
                raise ClientError(f"Unexpected roles listing: {e}") from e

            known = {role.value for role in Role}
            self._roles = frozenset(Role(r) for r in advertised if r in known)
            log.debug(f"Service roles: {sorted(self._roles)}")
        return self._roles

    def resolve(self, name: str, filter: str) -> PackageSet:
        self.require(Role.RESOLVE)
        return self._package_list(
            "api/v1/resolve", {"filter": filter, "packages": [name]}
        )

    def what_provides(self, capability: str, filter: str) -> PackageSet:
        self.require(Role.WHAT_PROVIDES)
        return self._package_list(
            "api/v1/what-provides",
            {"filter": filter, "provides": "any", "search": capability},
        )

    def get_depends(
        self, identity: PackageIdentity, recursive: bool, filter: str
    ) -> PackageSet:
        self.require(Role.GET_DEPENDS)
        return self._package_list(
            "api/v1/depends",
            {
                "filter": filter,
                "package_ids": [str(identity)],
                "recursive": recursive,
            },
        )

    def download(self, packages: PackageSet, directory: Path) -> list[Path]:
        self.require(Role.DOWNLOAD_PACKAGES)
        try:
            result = DownloadResponse.model_validate(
                self._post_json("api/v1/download", {"package_ids": packages.package_ids()})
            )
        except ValidationError as e:
            raise ClientError(f"Unexpected download listing: {e}") from e

        # never let the service place files outside the directory
        names = [Path(file.filename).name for file in result.files]
        for name in names:
            if name in ("", ".", ".."):
                raise ClientError(f"Invalid file name in download listing: {name!r}")
            if names.count(name) > 1:
                raise ClientError(f"Download listing names {name} more than once")

        downloaded = []
        for file, name in zip(result.files, names):
            destination = Path(directory) / name
            with self._request("GET", file.url, stream=True) as response:
                try:
                    with open(destination, "wb") as f:
                        for chunk in response.iter_content(1024 * 1024):
                            f.write(chunk)
                except requests.RequestException as e:
                    raise ClientError(f"Download of {file.url} failed: {e}") from e
                except OSError as e:
                    raise ClientError(f"Failed to write {destination}: {e}") from e
            log.debug(f"Downloaded {file.url} to {destination}")
            downloaded.append(destination)
        return downloaded
