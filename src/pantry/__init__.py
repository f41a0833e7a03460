"""Pantry: a desktop shopping list kept in sync with local storage."""

__all__ = ["__version__"]

__version__ = "0.1.0"
