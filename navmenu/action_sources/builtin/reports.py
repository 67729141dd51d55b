from __future__ import annotations

from ...services.menu.models import ActionSource

ACTION_SOURCE = ActionSource.declare(
    "Reports",
    ["index", "view", "export", "_render_pdf"],
    {"alias": {"export": "Download"}, "controllerButton": True},
)
