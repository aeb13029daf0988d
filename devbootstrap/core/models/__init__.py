"""
Domain models — Pydantic types for a provisioning run.

    from devbootstrap.core.models import BootstrapSettings, TaskResult
"""

from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.models.settings import BootstrapSettings

__all__ = [
    "BootstrapSettings",
    "TaskResult",
]
