from __future__ import annotations

from ...services.menu.models import ActionSource

ACTION_SOURCE = ActionSource.declare(
    "Users",
    ["index", "add", "edit", "delete", "admin_index", "admin_add", "admin_edit", "login", "logout"],
    {"exclude": ["login", "logout"], "alias": {"admin_add": "New User"}},
)
