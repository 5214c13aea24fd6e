"""Tests for downloading packages into the workspace"""

import pytest

from conftest import ScriptedConsole, pkg

from svcpack.context import PackContext
from svcpack.errors import Cancelled, FetchError
from svcpack.fetch import FetchOrchestrator
from svcpack.package_id import PackageSet


@pytest.fixture
def directory(test_path):
    path = test_path / "pack"
    path.mkdir()
    return path


def test_primary_is_one_batch_call(context, client, directory):
    files = FetchOrchestrator(context).fetch_primary(pkg("foo;1.0;amd64;"), directory)

    assert [f.name for f in files] == ["foo_1.0_amd64.pkg"]
    assert client.calls == [("download", ["foo;1.0;amd64;"])]


def test_no_dependencies_no_question(context, client, console, directory):
    files = FetchOrchestrator(context).fetch_dependencies(PackageSet(), directory)

    assert files == []
    assert client.calls == []
    assert console.prompts == []


def test_dependencies_confirmed_by_default(settings, client, directory):
    console = ScriptedConsole([""])
    context = PackContext(settings, client, console)
    depends = PackageSet.from_ids(["bar;1.0;amd64;", "baz;2.0;amd64;"])

    files = FetchOrchestrator(context).fetch_dependencies(depends, directory)

    assert len(files) == 2
    assert console.output == ["bar;1.0;amd64;", "baz;2.0;amd64;"]
    assert console.prompts == ["Okay to download the additional packages [Y/n] "]
    assert client.calls == [("download", ["bar;1.0;amd64;", "baz;2.0;amd64;"])]


def test_declined_dependencies_download_nothing(settings, client, directory):
    console = ScriptedConsole(["n"])
    context = PackContext(settings, client, console)
    depends = PackageSet.from_ids(["bar;1.0;amd64;"])

    with pytest.raises(Cancelled):
        FetchOrchestrator(context).fetch_dependencies(depends, directory)

    assert client.calls == []
    assert console.output[-1] == "Cancelled!"
    assert list(directory.iterdir()) == []


def test_fetch_downloads_primary_then_dependencies(settings, client, directory):
    context = PackContext(settings, client, ScriptedConsole(["y"]))
    depends = PackageSet.from_ids(["baz;2.0;amd64;"])

    FetchOrchestrator(context).fetch(pkg("foo;1.0;amd64;"), depends, directory)

    assert client.calls == [
        ("download", ["foo;1.0;amd64;"]),
        ("download", ["baz;2.0;amd64;"]),
    ]


def test_download_failure_is_fatal(context, client, directory):
    client.fail_download = True

    with pytest.raises(FetchError):
        FetchOrchestrator(context).fetch_primary(pkg("foo;1.0;amd64;"), directory)


def test_download_without_files_is_fatal(context, client, directory, monkeypatch):
    monkeypatch.setattr(client, "download", lambda packages, directory: [])

    with pytest.raises(FetchError):
        FetchOrchestrator(context).fetch_primary(pkg("foo;1.0;amd64;"), directory)


def test_download_with_missing_files_is_fatal(
    settings, client, directory, monkeypatch
):
    """Each requested package needs a file, a short batch is not packed"""
    context = PackContext(settings, client, ScriptedConsole(["y"]))
    download = client.download
    monkeypatch.setattr(
        client, "download", lambda packages, directory: download(packages, directory)[:1]
    )
    depends = PackageSet.from_ids(["bar;1.0;amd64;", "baz;2.0;amd64;"])

    with pytest.raises(FetchError, match="1 files for 2 packages"):
        FetchOrchestrator(context).fetch_dependencies(depends, directory)


def test_reported_file_not_in_workspace(context, client, directory, monkeypatch):
    monkeypatch.setattr(
        client, "download", lambda packages, directory: [directory / "ghost.pkg"]
    )

    with pytest.raises(FetchError, match="missing from the workspace"):
        FetchOrchestrator(context).fetch_primary(pkg("foo;1.0;amd64;"), directory)


def test_filesystem_error_is_a_fetch_error(context, client, directory, monkeypatch):
    def broken_download(packages, directory):
        raise IsADirectoryError(21, "Is a directory", str(directory))

    monkeypatch.setattr(client, "download", broken_download)

    with pytest.raises(FetchError):
        FetchOrchestrator(context).fetch_primary(pkg("foo;1.0;amd64;"), directory)
