"""Two-tier menu cache: a shared raw-entry set and per-principal trees.

The raw cache holds every discovered (pre-filter) entry under one global key.
Entries registered at runtime are merged into a loaded raw set by id; any id
the cached set does not know about means per-principal trees computed from it
are stale, so the returned ``BuildContext`` forces a rebuild.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from prometheus_client import Counter

from .models import BuildContext, MenuEntry
from .permissions import AccessPredicate, filter_entries
from .principal import Principal
from .store import CacheStore
from .tree import assemble_tree

logger = logging.getLogger(__name__)

CACHE_WRITE_FAILURES = Counter(
    "navmenu_cache_write_failures_total",
    "Menu cache writes the store rejected",
    ["tier"],
)

Discover = Callable[[], List[MenuEntry]]


def _entries_from_payload(payload: Any) -> Optional[List[MenuEntry]]:
    if not isinstance(payload, dict) or not isinstance(payload.get("entries"), list):
        return None
    try:
        return [MenuEntry.from_cache(item) for item in payload["entries"]]
    except ValueError as exc:
        logger.warning("menu_cache: raw cache payload invalid, ignoring: %s", exc)
        return None


class MenuCacheManager:
    def __init__(
        self,
        store: CacheStore,
        *,
        cache_key: str = "menu_storage",
        namespace: str = "menu_component",
        ttl: int = 86400,
        acl_path: str = "controllers/",
        acl_separator: str = "/",
    ) -> None:
        self.store = store
        self.cache_key = cache_key
        self.namespace = namespace
        self.ttl = ttl
        self.acl_path = acl_path
        self.acl_separator = acl_separator
        self._raw: List[MenuEntry] = []
        self._registered: Dict[str, MenuEntry] = {}
        self._lock = threading.RLock()

    @property
    def raw_entries(self) -> List[MenuEntry]:
        with self._lock:
            return list(self._raw)

    def register(self, entry: MenuEntry) -> None:
        """Keep the first entry registered under each id."""
        with self._lock:
            if entry.id in self._registered:
                return
            self._registered[entry.id] = entry
            if all(existing.id != entry.id for existing in self._raw):
                self._raw.append(entry)

    def principal_cache_key(self, principal: Principal) -> str:
        return f"{principal.cache_token()}_{self.cache_key}"

    # Raw tier

    def load_raw_cache(self) -> BuildContext:
        context = BuildContext()
        cached = _entries_from_payload(self.store.read(self.cache_key, self.namespace))
        with self._lock:
            if cached is None:
                # Nothing shared to trust; keep only what was registered in-process.
                self._raw = list(self._registered.values())
                context.force_rebuild = True
                return context
            self._raw = self._merge(cached, context)
        return context

    def _merge(self, cached: List[MenuEntry], context: BuildContext) -> List[MenuEntry]:
        known = {entry.id for entry in cached}
        added = [entry for entry in self._raw if entry.id not in known]
        if added:
            logger.info("menu_cache: %d entries missing from raw cache, forcing rebuild", len(added))
            context.force_rebuild = True
        return cached + added

    def write_raw_cache(self) -> bool:
        payload = {"entries": [entry.to_cache() for entry in self.raw_entries]}
        if self.store.write(self.cache_key, payload, self.namespace, self.ttl):
            return True
        CACHE_WRITE_FAILURES.labels("raw").inc()
        logger.warning("menu_cache: could not write menu cache")
        return False

    def clear_raw_cache(self) -> bool:
        """Delete the shared raw cache; per-principal trees expire on their own."""
        return self.store.delete(self.cache_key, self.namespace)

    # Per-principal tier

    def read_tree(self, principal: Principal) -> Optional[List[MenuEntry]]:
        payload = self.store.read(self.principal_cache_key(principal), self.namespace)
        if not isinstance(payload, list):
            return None
        try:
            return [MenuEntry.from_cache(item) for item in payload]
        except ValueError as exc:
            logger.warning("menu_cache: tree cache for %s invalid, rebuilding: %s", principal.key, exc)
            return None

    def write_tree(self, principal: Principal, tree: List[MenuEntry]) -> bool:
        payload = [entry.to_cache() for entry in tree]
        if self.store.write(self.principal_cache_key(principal), payload, self.namespace, self.ttl):
            return True
        CACHE_WRITE_FAILURES.labels("principal").inc()
        logger.warning("menu_cache: could not write menu for %s", principal.key)
        return False

    def _refresh_raw(self, discover: Discover, context: BuildContext) -> None:
        discovered = discover()
        known = {entry.id for entry in discovered}
        extra: List[MenuEntry] = []
        for entry in self._raw:
            if entry.id not in known:
                known.add(entry.id)
                extra.append(entry)
        self._raw = discovered + extra
        context.raw_changed = True

    def build_for(
        self,
        principal: Principal,
        context: BuildContext,
        *,
        discover: Discover,
        can_access: AccessPredicate,
    ) -> List[MenuEntry]:
        if not context.force_rebuild:
            cached = self.read_tree(principal)
            if cached is not None:
                context.cache_hit = True
                return cached

        with self._lock:
            if not self._raw or context.force_rebuild:
                self._refresh_raw(discover, context)
            raw = list(self._raw)

        allowed = filter_entries(
            principal,
            raw,
            can_access,
            base_path=self.acl_path,
            separator=self.acl_separator,
        )
        tree = assemble_tree(allowed)
        self.write_tree(principal, tree)
        return tree
