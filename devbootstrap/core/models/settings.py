"""
Bootstrap settings — every knob of a provisioning run.

Built by ``core.config.loader.load_settings`` from defaults, an optional
YAML file and environment variables.  Paths are absolute by the time
they reach this model.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from devbootstrap.core.data import (
    BASE_PACKAGES,
    CMDLINE_TOOLS_BASE_URL,
    VSCODE_EXTENSIONS,
)

DEFAULT_CMDLINE_TOOLS_ZIP = "commandlinetools-linux-11076708_latest.zip"


class BootstrapSettings(BaseModel):
    """Resolved configuration of one run."""

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    # Android
    android_api: str = "34"
    build_tools: str = "34.0.0"
    ndk_version: str = "26.3.11579264"
    cmake_version: str = "3.22.1"
    android_sdk_dir: Path
    cmdline_tools_zip: str = DEFAULT_CMDLINE_TOOLS_ZIP
    cmdline_tools_url: str = ""

    # Toolchain versions
    node_major: str = "20"
    dotnet_channel: str = "8.0"

    # Files
    home: Path
    log_file: Path
    profile_file: Path

    # Retries for network operations
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=2.0, ge=0)

    # Catalogs
    base_packages: list[str] = Field(default_factory=lambda: list(BASE_PACKAGES))
    extra_apt_packages: list[str] = Field(default_factory=list)
    vscode_extensions: list[str] = Field(default_factory=lambda: list(VSCODE_EXTENSIONS))

    @property
    def resolved_cmdline_tools_url(self) -> str:
        """Explicit URL, or the Google repository URL for the zip name."""
        if self.cmdline_tools_url:
            return self.cmdline_tools_url
        return f"{CMDLINE_TOOLS_BASE_URL}/{self.cmdline_tools_zip}"

    @property
    def dotnet_home(self) -> Path:
        return self.home / ".dotnet"

    @property
    def sdk_packages(self) -> list[str]:
        """Android SDK packages, in sdkmanager notation."""
        return [
            "platform-tools",
            f"platforms;android-{self.android_api}",
            f"build-tools;{self.build_tools}",
            "cmdline-tools;latest",
            f"ndk;{self.ndk_version}",
            f"cmake;{self.cmake_version}",
        ]

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["cmdline_tools_url"] = self.resolved_cmdline_tools_url
        return data
