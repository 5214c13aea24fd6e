"""Tests for the command line interface"""

import pytest

from conftest import ScriptedConsole

from svcpack.context import PackContext
from svcpack.main import get_parser, main
from svcpack.pack import METADATA_NAME, list_pack


@pytest.fixture
def foo_context(settings, client):
    client.by_name["foo"] = ["foo;1.0;amd64;main"]
    client.depends["foo;1.0;amd64;main"] = ["bar;1.0;amd64;main"]
    return PackContext(settings, client, ScriptedConsole(["y"]))


def test_parser_options():
    args = get_parser().parse_args(
        ["--verbose", "--with-package-list", "/tmp/list.txt", "foo.pack", "foo"]
    )

    assert args.verbose
    assert str(args.with_package_list) == "/tmp/list.txt"
    assert args.pack_filename == "foo.pack"
    assert args.package == "foo"


def test_success(foo_context, test_path):
    pack = test_path / "foo.pack"

    assert main([str(pack), "foo"], context=foo_context) == 0
    assert list_pack(pack) == [METADATA_NAME, "foo_1.0_amd64.pkg", "bar_1.0_amd64.pkg"]
    assert foo_context.console.output[-1] == f"Created {pack} for foo-1.0.amd64"


def test_verbose_success(foo_context, test_path):
    assert main(["-v", str(test_path / "foo.pack"), "foo"], context=foo_context) == 0


@pytest.mark.parametrize("argv", [[], ["foo.pack"]])
def test_missing_arguments(argv, context, client, capsys):
    assert main(argv, context=context) == 1
    assert "pack name and packages" in capsys.readouterr().err
    assert client.calls == []


def test_invalid_suffix(context, client, test_path, capsys):
    assert main([str(test_path / "foo.tar"), "foo"], context=context) == 1
    assert "Failed to create pack" in capsys.readouterr().err
    assert client.calls == []


def test_resolution_failure(context, test_path, capsys):
    assert main([str(test_path / "foo.pack"), "nothing"], context=context) == 1
    assert "Could not find a package match" in capsys.readouterr().err


def test_cancelled(settings, client, test_path):
    client.by_name["foo"] = ["foo;1.0;amd64;main"]
    client.depends["foo;1.0;amd64;main"] = ["bar;1.0;amd64;main"]
    context = PackContext(settings, client, ScriptedConsole(["n"]))
    pack = test_path / "foo.pack"

    assert main([str(pack), "foo"], context=context) == 1
    assert not pack.exists()
    assert not settings.workspace_path.exists()


def test_missing_explicit_package_list(foo_context, test_path, capsys):
    argv = [
        "--with-package-list",
        str(test_path / "missing.txt"),
        str(test_path / "foo.pack"),
        "foo",
    ]

    assert main(argv, context=foo_context) == 1
    assert "Failed to load package list" in capsys.readouterr().err


def test_local_download_error(foo_context, test_path, monkeypatch, capsys):
    def broken_download(packages, directory):
        raise IsADirectoryError(21, "Is a directory", str(directory))

    monkeypatch.setattr(foo_context.client, "download", broken_download)
    pack = test_path / "foo.pack"

    assert main([str(pack), "foo"], context=foo_context) == 1
    assert "Failed to create pack" in capsys.readouterr().err
    assert not pack.exists()
