"""Plain data models shared by the UI layers."""

from .view_state import AppContext, ViewState

__all__ = ["AppContext", "ViewState"]
