"""
Pack archive creation

A pack is an uncompressed GNU tar archive. The first entry is always
metadata.conf holding exactly two lines:

    distro_id=<distro;version;arch>
    created=<ISO-8601 timestamp>

followed by one entry per package file, stored under its basename.
"""

import logging
import os
import platform
import tarfile
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel

from svcpack.errors import ArchiveError

log = logging.getLogger("svcpack.pack")

METADATA_NAME = "metadata.conf"


def get_distro_id() -> str:
    """Return "<os id>;<version id>;<machine>" of the running system"""
    try:
        os_release = platform.freedesktop_os_release()
    except OSError:
        os_release = {}

    return ";".join(
        (
            os_release.get("ID") or "unknown",
            os_release.get("VERSION_ID") or "unknown",
            platform.machine() or "unknown",
        )
    )


class ArchiveMetadata(BaseModel):
    distro_id: str
    created: datetime

    def to_text(self) -> str:
        return f"distro_id={self.distro_id}\ncreated={self.created.isoformat()}\n"

    @classmethod
    def from_text(cls, text: str) -> "ArchiveMetadata":
        values = {}
        for line in text.splitlines():
            key, sep, value = line.partition("=")
            if sep:
                values[key.strip()] = value.strip()
        return cls(**values)


def generate_metadata() -> ArchiveMetadata:
    return ArchiveMetadata(
        distro_id=get_distro_id(),
        created=datetime.now(UTC).replace(microsecond=0),
    )


def create_pack(
    archive_path: Path,
    files: Iterable[Path],
    metadata: Optional[ArchiveMetadata] = None,
) -> None:
    """Write a pack archive.

    The metadata goes first, then every file in the given order under its
    basename. Each file is deleted once it is in the archive.

    Args:
        archive_path: Pack file to write
        files: Package files to add
        metadata: Metadata to store, generated when not given

    Raises:
        ArchiveError: writing the archive failed. The archive is left
            behind and must be removed by the caller.
    """
    metadata = metadata or generate_metadata()

    # metadata is written to a file first so it gets the usual tar headers
    try:
        fd, meta_src = tempfile.mkstemp(prefix="svcpack-", suffix=".conf")
    except OSError as e:
        raise ArchiveError(f"failed to create metadata file: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(metadata.to_text())
        _write_tar(archive_path, Path(meta_src), files)
    except OSError as e:
        raise ArchiveError(f"failed to write {archive_path}: {e}") from e
    finally:
        try:
            Path(meta_src).unlink(missing_ok=True)
        except OSError as e:
            log.warning(f"Failed to delete {meta_src}: {e}")


def _write_tar(archive_path: Path, meta_src: Path, files: Iterable[Path]) -> None:
    try:
        tar = tarfile.open(archive_path, "w", format=tarfile.GNU_FORMAT)
    except OSError as e:
        raise ArchiveError(f"failed to open tar file: {archive_path}: {e}") from e

    # closing writes the end-of-archive blocks and may fail too
    with tar:
        _append(tar, meta_src, METADATA_NAME)
        for src in files:
            src = Path(src)
            log.debug(f"adding {src}")
            _append(tar, src, src.name)
            try:
                src.unlink()
            except OSError as e:
                log.warning(f"Failed to delete {src}: {e}")


def _append(tar: tarfile.TarFile, src: Path, dest: str) -> None:
    try:
        tar.add(src, arcname=dest, recursive=False)
    except OSError as e:
        raise ArchiveError(f"failed to copy {src} into {dest}: {e}") from e


def list_pack(archive_path: Path) -> list[str]:
    """Return the entry names of a pack in archive order"""
    with tarfile.open(archive_path, "r") as tar:
        return tar.getnames()


def read_pack_metadata(archive_path: Path) -> ArchiveMetadata:
    """Read the metadata entry of a pack

    Raises:
        ArchiveError: the first entry is not the metadata
    """
    with tarfile.open(archive_path, "r") as tar:
        first = tar.next()
        if first is None or first.name != METADATA_NAME:
            raise ArchiveError(f"{archive_path} does not start with {METADATA_NAME}")
        return ArchiveMetadata.from_text(
            tar.extractfile(first).read().decode("utf-8")
        )
