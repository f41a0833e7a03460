"""Application layer: command handling between the UI and the domain."""

from .coordinator import ListCoordinator

__all__ = ["ListCoordinator"]
