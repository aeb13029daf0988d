"""Node.js from the NodeSource repository."""

from __future__ import annotations

import logging
import re

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.data import NODESOURCE_KEY_URL, NODESOURCE_PREREQS
from devbootstrap.core.services.tasks.base import ProvisionTask

logger = logging.getLogger(__name__)

_NODE_VERSION_RE = re.compile(r"^v?(\d+)")


def node_major(ctx: ProvisionContext) -> str | None:
    """Major version of the ``node`` on PATH, or None."""
    if not ctx.runner.has("node"):
        return None
    r = ctx.runner.probe(["node", "-v"])
    if not r.ok:
        return None
    m = _NODE_VERSION_RE.match(r.stdout.strip())
    return m.group(1) if m else None


class NodeJsTask(ProvisionTask):
    id = "nodejs"
    title = "Node.js + npm"

    def is_present(self, ctx: ProvisionContext) -> bool:
        return node_major(ctx) == ctx.settings.node_major

    def install(self, ctx: ProvisionContext) -> str:
        major = ctx.settings.node_major
        logger.info("nodejs: configuring NodeSource %s.x", major)
        ctx.apt.install_missing(NODESOURCE_PREREQS)
        ctx.apt.add_repository(
            keyring="nodesource",
            list_name="nodesource",
            key_url=NODESOURCE_KEY_URL,
            source_line=(
                "deb [signed-by=/etc/apt/keyrings/nodesource.gpg] "
                f"https://deb.nodesource.com/node_{major}.x nodistro main"
            ),
        )
        # An older distro nodejs may already be installed: install, not install_missing.
        ctx.apt.install(["nodejs"])

        for argv in (["node", "-v"], ["npm", "-v"]):
            r = ctx.runner.probe(argv)
            logger.info("%s: %s", argv[0], r.first_line() or "unavailable")
        return f"installed Node.js {major}.x from NodeSource"
