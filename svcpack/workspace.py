"""Scratch directory the packages of one pack are downloaded into.

Only one pack generation may use a workspace path at a time; there is no
locking between runs.
"""

import logging
import shutil
from pathlib import Path

from svcpack.errors import WorkspaceError

log = logging.getLogger("svcpack.workspace")


class Workspace:
    """Owns the scratch directory of one pipeline run

    Used as a context manager the directory is created on enter and removed
    on exit, whatever happened in between.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def create(self) -> None:
        """Create the directory, removing a stale one of the same name first"""
        if self.path.exists():
            log.debug(f"Removing stale workspace {self.path}")
            try:
                if self.path.is_dir() and not self.path.is_symlink():
                    shutil.rmtree(self.path)
                else:
                    self.path.unlink()
            except OSError as e:
                raise WorkspaceError(f"Failed to remove {self.path}: {e}") from e

        try:
            self.path.mkdir(mode=0o777, parents=True)
        except OSError as e:
            raise WorkspaceError(f"Failed to create directory: {self.path}") from e
        log.debug(f"Created workspace {self.path}")

    def remove(self) -> None:
        """Remove the directory and everything in it, errors are only logged"""
        if not self.path.exists():
            return

        try:
            shutil.rmtree(self.path)
        except OSError as e:
            log.warning(f"Failed to remove workspace {self.path}: {e}")
            return
        log.debug(f"Removed workspace {self.path}")

    def __enter__(self) -> "Workspace":
        self.create()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.remove()
