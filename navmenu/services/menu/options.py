from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional

from .models import SourceOptions

EXCLUDE_ALL = "*"
PRIVATE_PREFIX = "_"


@dataclass(frozen=True)
class MenuDefaults:
    """Global discovery defaults shared by every action source."""

    exclude_actions: tuple[str, ...] = ("view", "edit", "delete")
    excluded_methods: tuple[str, ...] = ()
    admin_prefix: Optional[str] = "admin"
    default_parent: Optional[str] = None

    def default_exclusions(self) -> FrozenSet[str]:
        names = set(self.exclude_actions) | set(self.excluded_methods)
        if self.admin_prefix:
            for base in ("edit", "delete", "view"):
                names.add(f"{self.admin_prefix}_{base}")
        return frozenset(name.lower() for name in names)

    @classmethod
    def from_settings(cls, settings) -> "MenuDefaults":
        return cls(
            exclude_actions=tuple(settings.menu_exclude_actions),
            excluded_methods=tuple(settings.menu_excluded_methods),
            admin_prefix=settings.menu_admin_prefix or None,
            default_parent=settings.menu_default_parent,
        )


@dataclass(frozen=True)
class EffectiveOptions:
    exclusions: FrozenSet[str]
    alias: Dict[str, str] = field(default_factory=dict)
    parent: Optional[str] = None
    emit_group_entry: bool = True
    admin_prefix: Optional[str] = None

    def is_excluded(self, action: str) -> bool:
        lowered = action.lower()
        return lowered.startswith(PRIVATE_PREFIX) or lowered in self.exclusions

    def filter_actions(self, actions: Iterable[str]) -> list[str]:
        return [action for action in actions if not self.is_excluded(action)]


def merge_source_options(defaults: MenuDefaults, options: SourceOptions) -> Optional[EffectiveOptions]:
    """Merge global defaults with one source's options.

    Returns ``None`` when the source opts out entirely (``exclude`` contains ``*``).
    """
    if EXCLUDE_ALL in options.exclude:
        return None
    exclusions = defaults.default_exclusions() | {name.lower() for name in options.exclude}
    parent = options.parent if options.parent is not None else defaults.default_parent
    return EffectiveOptions(
        exclusions=frozenset(exclusions),
        alias=dict(options.alias),
        parent=parent,
        emit_group_entry=options.emit_group_entry,
        admin_prefix=defaults.admin_prefix,
    )
