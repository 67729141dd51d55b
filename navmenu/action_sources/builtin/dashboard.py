from __future__ import annotations

from ...services.menu.models import ActionSource

ACTION_SOURCE = ActionSource.declare(
    "Dashboard",
    ["index", "stats"],
    {"controllerButton": False},
)
