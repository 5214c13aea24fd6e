"""
Configuration for the service pack generator

Every value can be overridden through the environment using the
SVCPACK_ prefix, e.g. SVCPACK_UPSTREAM_URL=http://pkg.example.org
"""

import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for svcpack"""

    model_config = SettingsConfigDict(env_prefix="svcpack_")

    # Package-management service
    upstream_url: str = "http://localhost:8000"
    request_timeout: float = 60.0

    # Packages assumed to be installed on the target system
    package_list_path: Path = Path("/var/lib/PackageKit/package-list.txt")

    # Scratch directory downloads are staged in
    workspace_path: Path = Path(tempfile.gettempdir()) / "pack"

    pack_suffix: str = ".pack"

    # Filter passed to resolve, what-provides and get-depends
    filter: str = "none"


# Global settings instance
settings = Settings()
