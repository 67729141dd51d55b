from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import List

from ..services.menu.models import ActionSource
from .registry import add_action_source, clear_action_sources, registered_action_sources

logger = logging.getLogger(__name__)

_BOOTSTRAPPED = False


def _ensure_builtin_sources() -> None:
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    package = importlib.import_module(".builtin", __package__)
    for module_info in pkgutil.iter_modules(package.__path__):
        module = importlib.import_module(f"{package.__name__}.{module_info.name}")
        source = getattr(module, "ACTION_SOURCE", None)
        if not isinstance(source, ActionSource):
            continue
        add_action_source(source)
        logger.debug("action_sources: registered builtin %s", source.name)
    _BOOTSTRAPPED = True


def get_action_sources() -> List[ActionSource]:
    _ensure_builtin_sources()
    return registered_action_sources()


def reset_action_sources() -> None:
    """Forget every registered source; builtins load again on next access."""
    global _BOOTSTRAPPED
    clear_action_sources()
    _BOOTSTRAPPED = False
