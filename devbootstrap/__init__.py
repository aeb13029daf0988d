"""devbootstrap — idempotent provisioning of a game/native dev environment."""

__version__ = "0.1.0"
