"""
Service pack generation pipeline

The stages run strictly one after the other:

    init -> resolving -> collecting_dependencies -> filtering
         -> fetching -> assembling -> done

Any error moves the pipeline to failed. The workspace is removed on every
exit path and a partially written pack is deleted.
"""

from enum import StrEnum
from pathlib import Path
from typing import Optional

from svcpack.context import PackContext
from svcpack.errors import Cancelled, ServicePackError
from svcpack.fetch import FetchOrchestrator
from svcpack.package_id import PackageIdentity
from svcpack.package_resolution import (
    DependencyCollector,
    IdentityResolver,
    check_capabilities,
)
from svcpack.package_selection import exclude_packages
from svcpack.pack import create_pack
from svcpack.workspace import Workspace


class PipelineState(StrEnum):
    INIT = "init"
    RESOLVING = "resolving"
    COLLECTING_DEPENDENCIES = "collecting_dependencies"
    FILTERING = "filtering"
    FETCHING = "fetching"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


def check_pack_filename(pack_path: Path, suffix: str) -> None:
    if not str(pack_path).endswith(suffix):
        raise ServicePackError(
            f"Invalid name for the service pack, specify a name with {suffix} extension"
        )


class ServicePackGenerator:
    """Generates one service pack per call to generate()"""

    def __init__(self, context: PackContext):
        self.context = context
        self.state = PipelineState.INIT
        self.identity: Optional[PackageIdentity] = None

    def _enter(self, state: PipelineState) -> None:
        self.context.log.debug(f"{self.state} -> {state}")
        self.state = state

    def confirm_overwrite(self, pack_path: Path) -> None:
        """Ask before replacing an existing pack

        Raises:
            Cancelled: the user does not want to overwrite it
        """
        if not Path(pack_path).exists():
            return
        console = self.context.console
        if not console.get_prompt(
            "A pack with the same name already exists, do you want to overwrite it?",
            False,
        ):
            console.print("Cancelled!")
            raise Cancelled(f"{pack_path} exists")

    def generate(
        self,
        pack_path: Path,
        reference: str,
        package_list: Optional[Path] = None,
    ) -> PackageIdentity:
        """
        Generate a service pack.

        Args:
            pack_path: Pack file to create, must carry the pack suffix
            reference: Package id, name or capability of the main package
            package_list: Package list of the target system. Defaults to
                settings.package_list_path, which may be missing; a list
                given here must exist.

        Returns:
            Identity of the packed main package

        Raises:
            ServicePackError: a stage failed
            Cancelled: the user declined a question
        """
        settings = self.context.settings
        pack_path = Path(pack_path)
        self.state = PipelineState.INIT

        try:
            check_pack_filename(pack_path, settings.pack_suffix)
            check_capabilities(self.context)
            self.confirm_overwrite(pack_path)

            with Workspace(settings.workspace_path) as workspace:
                self._run(workspace, pack_path, reference, package_list)
        except Exception:
            self._enter(PipelineState.FAILED)
            raise

        self._enter(PipelineState.DONE)
        return self.identity

    def _run(
        self,
        workspace: Workspace,
        pack_path: Path,
        reference: str,
        package_list: Optional[Path],
    ) -> None:
        context = self.context
        settings = context.settings

        self._enter(PipelineState.RESOLVING)
        self.identity = IdentityResolver(context).resolve(reference, settings.filter)
        context.log.info(f"Packing {self.identity}")

        self._enter(PipelineState.COLLECTING_DEPENDENCIES)
        depends = DependencyCollector(context).collect(self.identity, recursive=True)

        self._enter(PipelineState.FILTERING)
        depends = exclude_packages(
            depends,
            package_list or settings.package_list_path,
            required=package_list is not None,
        )

        self._enter(PipelineState.FETCHING)
        files = FetchOrchestrator(context).fetch(self.identity, depends, workspace.path)

        self._enter(PipelineState.ASSEMBLING)
        try:
            create_pack(pack_path, files)
        except Exception:
            self._remove_partial_pack(pack_path)
            raise

    def _remove_partial_pack(self, pack_path: Path) -> None:
        try:
            pack_path.unlink(missing_ok=True)
        except OSError as e:
            self.context.log.warning(f"Failed to remove partial pack {pack_path}: {e}")
