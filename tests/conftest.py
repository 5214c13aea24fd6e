from pathlib import Path

import pytest

from svcpack.client import PackageClient, Role
from svcpack.config import Settings
from svcpack.console import Console
from svcpack.context import PackContext
from svcpack.errors import ClientError
from svcpack.package_id import PackageIdentity, PackageSet


def pkg(text: str) -> PackageIdentity:
    return PackageIdentity.from_string(text)


class FakeClient(PackageClient):
    """In-memory package service recording every call"""

    def __init__(self, roles=None):
        self._roles = frozenset(Role) if roles is None else frozenset(roles)
        self.by_name: dict[str, list[str]] = {}
        self.by_provides: dict[str, list[str]] = {}
        self.depends: dict[str, list[str]] = {}
        self.fail_depends = False
        self.fail_download = False
        self.calls: list[tuple] = []

    def roles(self):
        return self._roles

    def resolve(self, name, filter):
        self.calls.append(("resolve", name, filter))
        self.require(Role.RESOLVE)
        return PackageSet.from_ids(self.by_name.get(name, []))

    def what_provides(self, capability, filter):
        self.calls.append(("what_provides", capability, filter))
        self.require(Role.WHAT_PROVIDES)
        return PackageSet.from_ids(self.by_provides.get(capability, []))

    def get_depends(self, identity, recursive, filter):
        self.calls.append(("get_depends", str(identity), recursive))
        self.require(Role.GET_DEPENDS)
        if self.fail_depends:
            raise ClientError("depends exploded")
        return PackageSet.from_ids(self.depends.get(str(identity), []))

    def download(self, packages, directory):
        self.calls.append(("download", packages.package_ids()))
        self.require(Role.DOWNLOAD_PACKAGES)
        if self.fail_download:
            raise ClientError("download exploded")
        files = []
        for identity in packages:
            path = Path(directory) / f"{identity.name}_{identity.version}_{identity.arch}.pkg"
            path.write_text(f"contents of {identity}\n")
            files.append(path)
        return files


class ScriptedConsole(Console):
    """Console answering from a list and collecting printed lines"""

    def __init__(self, answers=None):
        self.answers = list(answers or [])
        self.prompts: list[str] = []
        self.output: list[str] = []
        super().__init__(input_func=self._next_answer, output_func=self.output.append)

    def _next_answer(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def test_path(tmp_path):
    return tmp_path


@pytest.fixture
def settings(test_path):
    return Settings(
        upstream_url="http://localhost:8123",
        package_list_path=test_path / "package-list.txt",
        workspace_path=test_path / "pack",
    )


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def console():
    return ScriptedConsole()


@pytest.fixture
def context(settings, client, console):
    return PackContext(settings, client, console)
