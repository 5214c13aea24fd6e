"""Per-run context handed to every pack generation stage."""

import logging
from typing import Optional

from svcpack.client import PackageClient
from svcpack.config import Settings
from svcpack.console import Console


class PackContext:
    """Everything a stage needs, passed explicitly instead of kept globally

    Args:
        settings: Settings of this run
        client: Package service client
        console: Console used for questions and user-facing output
        log: Logger the stages report to, defaults to "svcpack.pipeline"
    """

    def __init__(
        self,
        settings: Settings,
        client: PackageClient,
        console: Optional[Console] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.settings = settings
        self.client = client
        self.console = console or Console()
        self.log = log or logging.getLogger("svcpack.pipeline")
