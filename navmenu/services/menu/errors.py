from __future__ import annotations


class MenuError(Exception):
    """Base error for menu discovery and assembly."""


class InvalidSourceOptions(MenuError, ValueError):
    """Per-source menu options are malformed (e.g. ``exclude`` is not a list)."""


class InvalidMenuEntry(MenuError, ValueError):
    """A manually registered entry cannot be completed into a menu entry."""
