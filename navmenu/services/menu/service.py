from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from prometheus_client import Counter

from ...settings.config import settings
from .cache import MenuCacheManager
from .errors import InvalidMenuEntry
from .inflector import humanize, slug
from .models import ActionSource, BuildContext, MenuEntry, MenuTarget
from .normalizer import generate_raw_entries
from .options import MenuDefaults
from .permissions import AccessPredicate
from .principal import Principal
from .store import CacheStore, build_cache_store

logger = logging.getLogger(__name__)

MENU_BUILDS = Counter(
    "navmenu_menu_builds_total",
    "Menu builds by outcome",
    ["outcome"],
)

SourceProvider = Callable[[], Iterable[ActionSource]]
PrincipalLike = Union[Principal, str, Mapping[str, Any]]


def _deny_all(principal: Principal, resource: str) -> bool:
    return False


@dataclass
class MenuService:
    """Host-facing facade over discovery, filtering, assembly and caching."""

    cache: MenuCacheManager
    sources: SourceProvider
    can_access: AccessPredicate = _deny_all
    defaults: MenuDefaults = field(default_factory=MenuDefaults)
    auto_load: bool = True
    menu: List[MenuEntry] = field(default_factory=list)

    @classmethod
    def build_default(
        cls,
        *,
        sources: Optional[SourceProvider] = None,
        can_access: Optional[AccessPredicate] = None,
        store: Optional[CacheStore] = None,
    ) -> "MenuService":
        if sources is None:
            from ...action_sources import get_action_sources

            sources = get_action_sources
        cache = MenuCacheManager(
            store or build_cache_store(),
            cache_key=settings.menu_cache_key,
            namespace=settings.menu_cache_config,
            ttl=settings.menu_cache_ttl_seconds,
            acl_path=settings.menu_acl_path,
            acl_separator=settings.menu_acl_separator,
        )
        return cls(
            cache=cache,
            sources=sources,
            can_access=can_access or _deny_all,
            defaults=MenuDefaults.from_settings(settings),
            auto_load=settings.menu_auto_load,
        )

    def discover(self) -> List[MenuEntry]:
        return generate_raw_entries(self.sources(), self.defaults)

    def build_menu(self, principal: PrincipalLike) -> List[MenuEntry]:
        tree, _ = self.build_menu_with_context(principal)
        return tree

    def build_menu_with_context(self, principal: PrincipalLike) -> Tuple[List[MenuEntry], BuildContext]:
        """Load the raw cache, build the principal's tree and persist a changed raw set."""
        resolved = Principal.parse(principal)
        context = self.cache.load_raw_cache()
        tree = self.cache.build_for(
            resolved,
            context,
            discover=self.discover,
            can_access=self.can_access,
        )
        if context.raw_changed:
            self.cache.write_raw_cache()
        MENU_BUILDS.labels("cache_hit" if context.cache_hit else "rebuilt").inc()
        return tree, context

    def startup(self, principal: Optional[PrincipalLike]) -> List[MenuEntry]:
        """Build ``self.menu`` for the current principal when auto-loading is on."""
        if not principal:
            # no active principal, no menu can be generated
            return self.menu
        if self.auto_load:
            self.menu = self.build_menu(principal)
        return self.menu

    def add_entry(self, entry: Union[MenuEntry, Mapping[str, Any]]) -> MenuEntry:
        """Register an entry by hand; it shows up from the next ``build_menu`` on."""
        completed = self._complete_entry(entry)
        self.cache.register(completed)
        logger.debug("menu: registered entry %s", completed.id)
        return completed

    def _complete_entry(self, entry: Union[MenuEntry, Mapping[str, Any]]) -> MenuEntry:
        data = entry.model_dump() if isinstance(entry, MenuEntry) else dict(entry)
        # legacy keys: "parent" and "url"
        if "parent" in data:
            data.setdefault("parent_id", data.pop("parent"))
        if data.get("target") is None and data.get("url") is not None:
            data["target"] = data["url"]
        data.pop("url", None)
        if data.get("parent_id") is None:
            data["parent_id"] = self.defaults.default_parent
        target = data.get("target")
        if target is not None and not isinstance(target, MenuTarget):
            if not isinstance(target, Mapping):
                raise InvalidMenuEntry("menu entry target must be a mapping")
            try:
                target = MenuTarget.model_validate(dict(target))
            except ValueError as exc:
                raise InvalidMenuEntry(f"invalid menu entry target: {exc}") from exc
            data["target"] = target

        if not data.get("id"):
            if target is None:
                raise InvalidMenuEntry("menu entry needs an id or a target")
            data["id"] = slug(target.source, target.action, *target.params.values())
        if not data.get("title") and target is not None and target.action:
            data["title"] = humanize(target.action)
        if data.get("weight") is None:
            data["weight"] = 0
        try:
            return MenuEntry.model_validate(data)
        except ValueError as exc:
            raise InvalidMenuEntry(f"invalid menu entry: {exc}") from exc

    def clear_raw_cache(self) -> bool:
        return self.cache.clear_raw_cache()

    def get_raw_entries(self) -> List[MenuEntry]:
        return self.cache.raw_entries


def build_menu_service(
    sources: Optional[Sequence[ActionSource]] = None,
    can_access: Optional[AccessPredicate] = None,
    store: Optional[CacheStore] = None,
) -> MenuService:
    provider = (lambda: list(sources)) if sources is not None else None
    return MenuService.build_default(sources=provider, can_access=can_access, store=store)
