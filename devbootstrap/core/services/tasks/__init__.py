"""
Provisioning tasks, in execution order.

    from devbootstrap.core.services.tasks import default_tasks
"""

from __future__ import annotations

from devbootstrap.core.services.tasks.android import AndroidSdkTask
from devbootstrap.core.services.tasks.base import AptPackagesTask, ProvisionTask
from devbootstrap.core.services.tasks.dotnet import DotnetTask, MonoGameTask, MonoTask
from devbootstrap.core.services.tasks.nodejs import NodeJsTask
from devbootstrap.core.services.tasks.packages import (
    BaseToolchainTask,
    DockerClientTask,
    JavaTask,
)
from devbootstrap.core.services.tasks.vscode import VSCodeExtensionsTask


def default_tasks() -> list[ProvisionTask]:
    """The full bootstrap, in order."""
    return [
        BaseToolchainTask(),
        NodeJsTask(),
        JavaTask(),
        DotnetTask(),
        MonoTask(),
        AndroidSdkTask(),
        MonoGameTask(),
        DockerClientTask(),
        VSCodeExtensionsTask(),
    ]


__all__ = [
    "AndroidSdkTask",
    "AptPackagesTask",
    "BaseToolchainTask",
    "DockerClientTask",
    "DotnetTask",
    "JavaTask",
    "MonoGameTask",
    "MonoTask",
    "NodeJsTask",
    "ProvisionTask",
    "VSCodeExtensionsTask",
    "default_tasks",
]
