"""
.NET SDK, Mono and MonoGame.

The SDK comes from the Microsoft apt repository; when that package is
unavailable (unsupported release, mirror trouble) the userland
``dotnet-install.sh`` puts it under ``~/.dotnet`` instead.  Mono and the
MonoGame tooling are best effort: a failure there never aborts the run.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.data import (
    DOTNET_INSTALL_URL,
    DOTNET_PREREQS,
    MICROSOFT_KEY_URL,
    MONO_FALLBACK_PACKAGES,
    MONO_PACKAGES,
    MONOGAME_MGCB_TOOL,
    MONOGAME_TEMPLATES,
)
from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.services.profile import export_line, path_line
from devbootstrap.core.services.tasks.base import ProvisionTask

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")
DEFAULT_CODENAME = "jammy"
_INFO_LINES = 25


def os_codename(os_release: Path = OS_RELEASE) -> str:
    """``VERSION_CODENAME`` from os-release, ``jammy`` when unknown."""
    try:
        with open(os_release, encoding="utf-8") as f:
            for line in f:
                if line.startswith("VERSION_CODENAME="):
                    value = line.strip().split("=", 1)[1].strip('"')
                    if value:
                        return value
    except OSError:
        pass
    return DEFAULT_CODENAME


def dotnet_version(ctx: ProvisionContext, binary: str = "dotnet") -> str:
    r = ctx.runner.probe([binary, "--version"])
    return r.stdout.strip() if r.ok else ""


class DotnetTask(ProvisionTask):
    id = "dotnet"
    title = ".NET SDK"

    def __init__(self, os_release: Path = OS_RELEASE):
        self.os_release = os_release

    def is_present(self, ctx: ProvisionContext) -> bool:
        if not ctx.runner.has("dotnet"):
            return False
        return dotnet_version(ctx).startswith(f"{ctx.settings.dotnet_channel}.")

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        # A previous userland install is not on PATH until the profile is sourced.
        userland = ctx.settings.dotnet_home / "dotnet"
        if not ctx.runner.has("dotnet") and os.access(userland, os.X_OK):
            self._activate_userland(ctx)
        return super().ensure(ctx)

    def install(self, ctx: ProvisionContext) -> str:
        channel = ctx.settings.dotnet_channel
        logger.info(".NET: installing from the Microsoft apt repository")
        ctx.apt.install_missing(DOTNET_PREREQS)

        codename = os_codename(self.os_release)
        arch = ctx.runner.run(["dpkg", "--print-architecture"]).stdout.strip()
        ctx.apt.add_repository(
            keyring="microsoft",
            list_name="microsoft-prod",
            key_url=MICROSOFT_KEY_URL,
            source_line=(
                f"deb [arch={arch} signed-by=/etc/apt/keyrings/microsoft.gpg] "
                f"https://packages.microsoft.com/ubuntu/{codename}/prod {codename} main"
            ),
        )

        if ctx.apt.install([f"dotnet-sdk-{channel}"], check=False):
            method = "apt"
        else:
            self._install_userland(ctx)
            method = "dotnet-install.sh"

        info = ctx.runner.probe(["dotnet", "--info"])
        for line in info.output.splitlines()[:_INFO_LINES]:
            logger.info("dotnet: %s", line)
        return f"installed .NET SDK {channel} ({method})"

    def _install_userland(self, ctx: ProvisionContext) -> None:
        channel = ctx.settings.dotnet_channel
        install_dir = ctx.settings.dotnet_home
        logger.info(".NET: fallback dotnet-install (userland) into %s", install_dir)
        with tempfile.TemporaryDirectory(prefix="devbootstrap-dotnet-") as tmp:
            script = str(Path(tmp) / "dotnet-install.sh")
            ctx.retry(
                ctx.runner.run,
                ["curl", "-fsSL", DOTNET_INSTALL_URL, "-o", script],
                description=f"download {DOTNET_INSTALL_URL}",
            )
            ctx.runner.run(
                ["bash", script, "--channel", channel, "--install-dir", str(install_dir)]
            )
        self._activate_userland(ctx)

    def _activate_userland(self, ctx: ProvisionContext) -> None:
        install_dir = str(ctx.settings.dotnet_home)
        ctx.export("DOTNET_ROOT", install_dir)
        ctx.prepend_path(install_dir)
        ctx.profile.ensure_lines([
            export_line("DOTNET_ROOT", install_dir),
            path_line("$DOTNET_ROOT"),
        ])


class MonoTask(ProvisionTask):
    id = "mono"
    title = "Mono"
    best_effort = True

    def is_present(self, ctx: ProvisionContext) -> bool:
        return ctx.runner.has("mono")

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        if self.is_present(ctx):
            return TaskResult.present(self.id, "mono already on PATH")

        installed = ctx.apt.install_missing(MONO_PACKAGES, check=False)
        if not ctx.runner.has("mono"):
            installed += ctx.apt.install_missing(MONO_FALLBACK_PACKAGES, check=False)

        if not ctx.runner.has("mono"):
            return TaskResult.failed(self.id, "mono is not available after install attempts")
        return TaskResult.installed(
            self.id, f"installed {' '.join(installed)}", details={"packages": installed}
        )


class MonoGameTask(ProvisionTask):
    """MonoGame C# templates and the MGCB content editor (global dotnet tool)."""

    id = "monogame"
    title = "MonoGame templates + MGCB editor"
    best_effort = True

    def is_present(self, ctx: ProvisionContext) -> bool:
        if not ctx.runner.has("dotnet"):
            return False
        tools = ctx.runner.probe(["dotnet", "tool", "list", "--global"])
        templates = ctx.runner.probe(["dotnet", "new", "list"])
        return (
            MONOGAME_MGCB_TOOL in tools.stdout.lower()
            and "monogame" in templates.stdout.lower()
        )

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        if not ctx.runner.has("dotnet"):
            return TaskResult.skipped(self.id, "dotnet not on PATH")

        tools_dir = ctx.settings.dotnet_home / "tools"
        ctx.profile.append_once(path_line("$HOME/.dotnet/tools"))
        ctx.prepend_path(str(tools_dir))

        if self.is_present(ctx):
            return TaskResult.present(self.id, "MonoGame tooling already installed")

        ctx.runner.run(["dotnet", "new", "install", MONOGAME_TEMPLATES], check=False)
        ctx.runner.run(
            ["dotnet", "tool", "install", "--global", MONOGAME_MGCB_TOOL], check=False
        )
        if not self.is_present(ctx):
            return TaskResult.failed(self.id, "MonoGame templates or MGCB editor not installed")
        return TaskResult.installed(self.id, "MonoGame templates + MGCB editor")
