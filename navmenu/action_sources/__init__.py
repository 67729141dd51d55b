from .registry import (
    add_action_source,
    clear_action_sources,
    register_action_source,
    registered_action_sources,
    unregister_action_source,
)
from .service import get_action_sources, reset_action_sources

__all__ = [
    "add_action_source",
    "clear_action_sources",
    "get_action_sources",
    "register_action_source",
    "registered_action_sources",
    "reset_action_sources",
    "unregister_action_source",
]
