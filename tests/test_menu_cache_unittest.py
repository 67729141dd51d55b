from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from navmenu.services.menu.cache import MenuCacheManager
from navmenu.services.menu.models import BuildContext, MenuEntry, MenuTarget
from navmenu.services.menu.principal import Principal
from navmenu.services.menu.store import MemoryCacheStore


def _entry(entry_id, parent=None):
    return MenuEntry(id=entry_id, parent_id=parent, title=entry_id, target=MenuTarget(source="Reports", action=entry_id))


def _allow_all(principal, resource):
    return True


class MenuCacheManagerTestCase(unittest.TestCase):
    def setUp(self):
        self.store = MemoryCacheStore()
        self.cache = MenuCacheManager(self.store, cache_key="menu_storage", namespace="menu_component", ttl=60)
        self.discover_calls = 0

    def _discover(self):
        self.discover_calls += 1
        return [_entry("a"), _entry("b")]

    def _seed_raw(self, *ids):
        self.store.write("menu_storage", {"entries": [_entry(i).to_cache() for i in ids]}, "menu_component", 60)

    def test_absent_raw_cache_forces_rebuild(self):
        context = self.cache.load_raw_cache()
        self.assertTrue(context.force_rebuild)

    def test_loaded_raw_cache_without_new_entries_does_not_force(self):
        self._seed_raw("a", "b")
        context = self.cache.load_raw_cache()
        self.assertFalse(context.force_rebuild)
        self.assertEqual([entry.id for entry in self.cache.raw_entries], ["a", "b"])

    def test_registered_entry_missing_from_cache_forces_rebuild(self):
        self._seed_raw("a", "b")
        self.cache.register(_entry("c"))
        context = self.cache.load_raw_cache()
        self.assertTrue(context.force_rebuild)
        self.assertEqual([entry.id for entry in self.cache.raw_entries], ["a", "b", "c"])

    def test_registered_entry_already_cached_is_not_duplicated(self):
        self._seed_raw("a", "b")
        self.cache.register(_entry("a"))
        context = self.cache.load_raw_cache()
        self.assertFalse(context.force_rebuild)
        self.assertEqual([entry.id for entry in self.cache.raw_entries], ["a", "b"])

    def test_merge_then_build_includes_new_entry_once(self):
        self._seed_raw("a", "b")
        self.cache.register(_entry("c"))
        context = self.cache.load_raw_cache()
        tree = self.cache.build_for(Principal("role", 1), context, discover=self._discover, can_access=_allow_all)
        self.assertEqual(sorted(entry.id for entry in self.cache.raw_entries), ["a", "b", "c"])
        self.assertEqual(sorted(entry.id for entry in tree), ["a", "b", "c"])
        self.assertTrue(context.raw_changed)

    def test_cached_tree_is_returned_without_rebuild(self):
        principal = Principal("role", 1)
        first = self.cache.build_for(principal, self.cache.load_raw_cache(), discover=self._discover, can_access=_allow_all)
        self.cache.write_raw_cache()
        context = self.cache.load_raw_cache()
        second = self.cache.build_for(principal, context, discover=self._discover, can_access=_allow_all)
        self.assertTrue(context.cache_hit)
        self.assertEqual(self.discover_calls, 1)
        self.assertEqual(
            [entry.model_dump() for entry in first],
            [entry.model_dump() for entry in second],
        )

    def test_forced_context_ignores_cached_tree(self):
        principal = Principal("role", 1)
        self.cache.build_for(principal, BuildContext(force_rebuild=True), discover=self._discover, can_access=_allow_all)
        context = BuildContext(force_rebuild=True)
        self.cache.build_for(principal, context, discover=self._discover, can_access=_allow_all)
        self.assertFalse(context.cache_hit)
        self.assertEqual(self.discover_calls, 2)

    def test_principal_keys_include_kind(self):
        role_key = self.cache.principal_cache_key(Principal("role", 1))
        group_key = self.cache.principal_cache_key(Principal("group", 1))
        self.assertNotEqual(role_key, group_key)
        self.assertTrue(role_key.endswith("_menu_storage"))

    def test_principal_keys_do_not_collide(self):
        principals = [
            Principal("user", "a-b"),
            Principal("user", "a_b"),
            Principal("user", "A_B"),
            Principal("role", "1_2"),
            Principal("role_1", "2"),
            Principal("role", "1:2"),
            Principal("role:1", "2"),
        ]
        keys = {self.cache.principal_cache_key(principal) for principal in principals}
        self.assertEqual(len(keys), len(principals))

    def test_similar_ids_do_not_share_a_cached_tree(self):
        def can_access(principal, resource):
            return principal.identifier == "a-b" or resource.endswith("/a")

        first = self.cache.build_for(Principal("user", "a-b"), BuildContext(), discover=self._discover, can_access=can_access)
        context = BuildContext()
        second = self.cache.build_for(Principal("user", "a_b"), context, discover=self._discover, can_access=can_access)
        self.assertEqual([entry.id for entry in first], ["a", "b"])
        self.assertFalse(context.cache_hit)
        self.assertEqual([entry.id for entry in second], ["a"])

    def test_trees_are_cached_per_principal(self):
        def can_access(principal, resource):
            return principal.kind == "role" or resource.endswith("/a")

        role_tree = self.cache.build_for(Principal("role", 1), BuildContext(), discover=self._discover, can_access=can_access)
        group_tree = self.cache.build_for(Principal("group", 1), BuildContext(), discover=self._discover, can_access=can_access)
        self.assertEqual([entry.id for entry in role_tree], ["a", "b"])
        self.assertEqual([entry.id for entry in group_tree], ["a"])

    def test_write_failure_still_returns_tree(self):
        with patch.object(self.store, "write", return_value=False):
            with self.assertLogs("navmenu.services.menu.cache", level="WARNING"):
                tree = self.cache.build_for(
                    Principal("role", 1), BuildContext(force_rebuild=True), discover=self._discover, can_access=_allow_all
                )
                self.assertFalse(self.cache.write_raw_cache())
        self.assertEqual([entry.id for entry in tree], ["a", "b"])

    def test_read_failure_is_a_miss(self):
        with patch.object(self.store, "read", return_value=None):
            context = self.cache.load_raw_cache()
        self.assertTrue(context.force_rebuild)

    def test_corrupt_raw_payload_is_a_miss(self):
        self.store.write("menu_storage", {"entries": [{"title": "no id"}]}, "menu_component", 60)
        with self.assertLogs("navmenu.services.menu.cache", level="WARNING"):
            context = self.cache.load_raw_cache()
        self.assertTrue(context.force_rebuild)

    def test_clear_removes_only_raw_key(self):
        principal = Principal("role", 1)
        self.cache.build_for(principal, BuildContext(force_rebuild=True), discover=self._discover, can_access=_allow_all)
        self.cache.write_raw_cache()
        self.assertTrue(self.cache.clear_raw_cache())
        self.assertIsNone(self.store.read("menu_storage", "menu_component"))
        self.assertIsNotNone(self.cache.read_tree(principal))

    def test_rebuild_after_clear_runs_discovery_again(self):
        principal = Principal("role", 1)
        self.cache.build_for(principal, self.cache.load_raw_cache(), discover=self._discover, can_access=_allow_all)
        self.cache.write_raw_cache()
        self.cache.clear_raw_cache()
        context = self.cache.load_raw_cache()
        self.cache.build_for(principal, context, discover=self._discover, can_access=_allow_all)
        self.assertEqual(self.discover_calls, 2)

    def test_discovered_entry_wins_over_registered_duplicate(self):
        self.cache.register(MenuEntry(id="a", title="manual"))
        self.cache.build_for(Principal("role", 1), self.cache.load_raw_cache(), discover=self._discover, can_access=_allow_all)
        raw = self.cache.raw_entries
        self.assertEqual([entry.id for entry in raw], ["a", "b"])
        self.assertEqual(raw[0].title, "a")

    def test_repeated_registration_keeps_first_entry_per_id(self):
        for round_number in range(100):
            self.cache.register(MenuEntry(id="help", title=f"help {round_number}"))
        self.assertEqual([entry.title for entry in self.cache.raw_entries], ["help 0"])
        context = self.cache.load_raw_cache()
        self.cache.build_for(Principal("role", 1), context, discover=self._discover, can_access=_allow_all)
        self.assertEqual(len(self.cache._registered), 1)
        self.assertEqual([entry.id for entry in self.cache.raw_entries], ["a", "b", "help"])


class MemoryCacheStoreTestCase(unittest.TestCase):
    def test_expired_values_read_as_absent(self):
        store = MemoryCacheStore()
        with patch("navmenu.services.menu.store.time.monotonic", return_value=100.0):
            store.write("k", {"v": 1}, "ns", 10)
        with patch("navmenu.services.menu.store.time.monotonic", return_value=105.0):
            self.assertEqual(store.read("k", "ns"), {"v": 1})
        with patch("navmenu.services.menu.store.time.monotonic", return_value=111.0):
            self.assertIsNone(store.read("k", "ns"))

    def test_namespaces_are_separate(self):
        store = MemoryCacheStore()
        store.write("k", 1, "a", 0)
        self.assertIsNone(store.read("k", "b"))
        self.assertTrue(store.delete("k", "a"))
        self.assertFalse(store.delete("k", "a"))


if __name__ == "__main__":
    unittest.main()
