from __future__ import annotations

from ...services.menu.models import ActionSource

# Base source the others inherit from; discovery skips it.
ACTION_SOURCE = ActionSource.declare("App", ["index"])
