"""
Android SDK — cmdline-tools bootstrap plus sdkmanager packages.

Layout under ``ANDROID_SDK_DIR``::

    cmdline-tools/latest/bin/sdkmanager   (from the cmdline-tools zip)
    platform-tools/ platforms/ build-tools/ ndk/ cmake/   (from sdkmanager)

An SDK package counts as installed when its directory holds the
``package.xml`` that sdkmanager writes, so only missing packages are
requested on a re-run.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.errors import ProvisionError
from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.models.settings import BootstrapSettings
from devbootstrap.core.services.profile import export_line, path_line
from devbootstrap.core.services.tasks.base import ProvisionTask

logger = logging.getLogger(__name__)

# Enough answers for every license prompt
_LICENSE_ANSWERS = "y\n" * 50


def sdkmanager_path(settings: BootstrapSettings) -> Path:
    return settings.android_sdk_dir / "cmdline-tools" / "latest" / "bin" / "sdkmanager"


def package_dir(settings: BootstrapSettings, package: str) -> Path:
    """``build-tools;34.0.0`` → ``<sdk>/build-tools/34.0.0``."""
    return settings.android_sdk_dir.joinpath(*package.split(";"))


def missing_packages(settings: BootstrapSettings) -> list[str]:
    return [
        pkg for pkg in settings.sdk_packages
        if not (package_dir(settings, pkg) / "package.xml").is_file()
    ]


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class AndroidSdkTask(ProvisionTask):
    id = "android"
    title = "Android SDK/NDK/CMake"

    def is_present(self, ctx: ProvisionContext) -> bool:
        return _is_executable(sdkmanager_path(ctx.settings)) and not missing_packages(
            ctx.settings
        )

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        settings = ctx.settings
        sdk = settings.android_sdk_dir
        logger.info("Android: preparing SDK in %s", sdk)
        for d in (sdk / "cmdline-tools", sdk / "platform-tools", settings.home / ".android"):
            d.mkdir(parents=True, exist_ok=True)

        actions: list[str] = []
        if _is_executable(sdkmanager_path(settings)):
            logger.info("Android: cmdline-tools already present")
        else:
            self._download_cmdline_tools(ctx)
            actions.append("cmdline-tools")

        self._activate(ctx)
        ctx.runner.require("sdkmanager")

        missing = missing_packages(settings)
        if missing:
            sdk_root = f"--sdk_root={sdk}"
            logger.info("Android: accepting licenses")
            ctx.runner.run(
                ["sdkmanager", sdk_root, "--licenses"],
                input_text=_LICENSE_ANSWERS,
                check=False,
            )
            logger.info("Android: installing %s", " ".join(missing))
            ctx.runner.run(["sdkmanager", sdk_root, *missing])
            actions.extend(missing)
        else:
            logger.info("Android: all SDK packages present")

        if ctx.runner.has("adb"):
            logger.info("adb: %s", ctx.runner.probe(["adb", "version"]).first_line())

        if not actions:
            return TaskResult.present(self.id, f"Android SDK complete in {sdk}")
        return TaskResult.installed(
            self.id, f"installed {len(actions)} component(s)", details={"components": actions}
        )

    def _download_cmdline_tools(self, ctx: ProvisionContext) -> None:
        settings = ctx.settings
        url = settings.resolved_cmdline_tools_url
        latest = settings.android_sdk_dir / "cmdline-tools" / "latest"
        logger.info("Android: downloading cmdline-tools from %s", url)

        tmpdir = Path(tempfile.mkdtemp(prefix="devbootstrap-android-"))
        try:
            archive = tmpdir / "cmdline.zip"
            ctx.retry(
                ctx.runner.run,
                ["curl", "-fsSL", "-o", str(archive), url],
                description=f"download {url}",
            )
            ctx.runner.run(["unzip", "-q", str(archive), "-d", str(tmpdir)])
            extracted = tmpdir / "cmdline-tools"
            if not extracted.is_dir():
                raise ProvisionError(f"{url} does not contain a cmdline-tools directory")
            if latest.exists():
                shutil.rmtree(latest)
            shutil.move(str(extracted), str(latest))
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)

    def _activate(self, ctx: ProvisionContext) -> None:
        sdk = str(ctx.settings.android_sdk_dir)
        ctx.export("ANDROID_SDK_ROOT", sdk)
        ctx.export("ANDROID_HOME", sdk)
        ctx.prepend_path(f"{sdk}/cmdline-tools/latest/bin", f"{sdk}/platform-tools")
        ctx.profile.ensure_lines([
            export_line("ANDROID_SDK_ROOT", sdk),
            export_line("ANDROID_HOME", "$ANDROID_SDK_ROOT"),
            path_line(
                "$ANDROID_SDK_ROOT/cmdline-tools/latest/bin",
                "$ANDROID_SDK_ROOT/platform-tools",
            ),
        ])
