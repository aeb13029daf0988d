"""Plain apt-package tasks: base toolchain, Java, Docker client."""

from __future__ import annotations

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.data import DOCKER_PACKAGES, JAVA_PACKAGES
from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.services.tasks.base import AptPackagesTask


class BaseToolchainTask(AptPackagesTask):
    id = "base"
    title = "Base packages + toolchain"

    def package_list(self, ctx: ProvisionContext) -> list[str]:
        return [*ctx.settings.base_packages, *ctx.settings.extra_apt_packages]


class JavaTask(AptPackagesTask):
    id = "java"
    title = "Java 17 + Gradle"
    packages = JAVA_PACKAGES


class DockerClientTask(AptPackagesTask):
    """Docker client and compose plugin.

    The daemon may not exist (e.g. inside a Codespace); only the client
    is required.  Group membership takes effect in a new login shell.
    """

    id = "docker"
    title = "Docker client + compose plugin"
    packages = DOCKER_PACKAGES

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        result = super().ensure(ctx)
        user = ctx.env.get("USER", "")
        if user and ctx.runner.has("docker") and not self._in_docker_group(ctx, user):
            ctx.runner.run(["usermod", "-aG", "docker", user], sudo=True, check=False)
        return result

    @staticmethod
    def _in_docker_group(ctx: ProvisionContext, user: str) -> bool:
        r = ctx.runner.probe(["id", "-nG", user])
        return r.ok and "docker" in r.stdout.split()
