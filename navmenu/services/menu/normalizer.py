"""Turn action-source declarations into flat menu entries."""
from __future__ import annotations

import logging
from typing import Iterable, List

from .inflector import humanize, slug, underscore
from .models import ActionSource, MenuEntry, MenuTarget
from .options import EffectiveOptions, MenuDefaults, merge_source_options

logger = logging.getLogger(__name__)

# Host base source every other source inherits from; never a menu of its own.
RESERVED_SOURCES = frozenset({"app"})


def _is_admin_action(action: str, admin_prefix: str | None) -> bool:
    return bool(admin_prefix) and action.lower().startswith(f"{admin_prefix.lower()}_")


def normalize_source(source: ActionSource, policy: EffectiveOptions) -> List[MenuEntry]:
    group_id = slug(source.name)
    parent = group_id if policy.emit_group_entry else policy.parent
    entries: List[MenuEntry] = []
    has_admin_actions = False

    for action in policy.filter_actions(source.actions):
        title = policy.alias.get(action) or humanize(underscore(action))
        admin = None
        if policy.admin_prefix:
            admin = _is_admin_action(action, policy.admin_prefix)
            has_admin_actions = has_admin_actions or admin
        entries.append(
            MenuEntry(
                id=slug(source.name, action),
                parent_id=parent,
                title=title,
                target=MenuTarget(source=source.name, action=action, admin=admin),
                weight=0,
            )
        )

    if policy.emit_group_entry:
        # Prefer the admin index when the source exposes admin actions.
        index_action = f"{policy.admin_prefix}_index" if has_admin_actions else "index"
        entries.append(
            MenuEntry(
                id=group_id,
                parent_id=policy.parent,
                title=humanize(source.name),
                target=MenuTarget(source=source.name, action=index_action, admin=has_admin_actions),
                weight=0,
            )
        )
    return entries


def generate_raw_entries(sources: Iterable[ActionSource], defaults: MenuDefaults) -> List[MenuEntry]:
    """Run discovery across every declared action source."""
    raw: List[MenuEntry] = []
    for source in sources:
        if source.name.strip().lower() in RESERVED_SOURCES:
            continue
        policy = merge_source_options(defaults, source.options)
        if policy is None:
            logger.debug("menu: source %s excluded from menus", source.name)
            continue
        raw.extend(normalize_source(source, policy))
    logger.info("menu: discovered %d raw entries", len(raw))
    return raw
