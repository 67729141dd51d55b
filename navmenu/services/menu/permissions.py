from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from .inflector import camelize
from .models import MenuEntry
from .principal import Principal

logger = logging.getLogger(__name__)

AccessPredicate = Callable[[Principal, str], bool]


def resource_id(entry: MenuEntry, base_path: str = "controllers/", separator: str = "/") -> str:
    """Derive the ACL resource identifier for an entry.

    ``controllers/Reports/export`` for ``{source: "reports", action: "export"}``;
    the action segment is omitted when the target names no action. Entries
    without a target are checked against ``base_path + id``.
    """
    target = entry.target
    if target is None:
        return f"{base_path}{entry.id}"
    resource = f"{base_path}{camelize(target.source)}"
    if target.action:
        resource = f"{resource}{separator}{target.action}"
    return resource


def filter_entries(
    principal: Principal,
    entries: Iterable[MenuEntry],
    can_access: AccessPredicate,
    *,
    base_path: str = "controllers/",
    separator: str = "/",
) -> List[MenuEntry]:
    allowed: List[MenuEntry] = []
    for entry in entries:
        resource = resource_id(entry, base_path, separator)
        try:
            granted = bool(can_access(principal, resource))
        except Exception as exc:  # noqa: BLE001
            logger.warning("menu: access check failed for %s on %s, denying: %s", principal.key, resource, exc)
            granted = False
        if granted:
            allowed.append(entry)
    return allowed
