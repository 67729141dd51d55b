from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

from ..services.menu.models import ActionSource, SourceOptions

_REGISTRY: Dict[str, ActionSource] = {}


def _normalize_source_name(name: str | None) -> str:
    return (name or "").strip().lower()


def register_action_source(
    name: str,
    actions: Sequence[str],
    options: Union[SourceOptions, Mapping[str, Any], None] = None,
) -> ActionSource:
    normalized = _normalize_source_name(name)
    if not normalized:
        raise ValueError("source name is required")
    source = ActionSource.declare(name.strip(), actions, options)
    _REGISTRY[normalized] = source
    return source


def add_action_source(source: ActionSource) -> None:
    normalized = _normalize_source_name(source.name)
    if not normalized:
        raise ValueError("source name is required")
    _REGISTRY[normalized] = source


def unregister_action_source(name: str) -> None:
    _REGISTRY.pop(_normalize_source_name(name), None)


def registered_action_sources() -> List[ActionSource]:
    return list(_REGISTRY.values())


def clear_action_sources() -> None:
    _REGISTRY.clear()
