"""Presentation layer (Qt widgets)."""

from .main_window import ItemListWindow

__all__ = ["ItemListWindow"]
