from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from navmenu.action_sources import (
    clear_action_sources,
    get_action_sources,
    register_action_source,
    reset_action_sources,
    unregister_action_source,
)
from navmenu.services.menu import InvalidSourceOptions, MenuDefaults, generate_raw_entries


class ActionSourceRegistryTestCase(unittest.TestCase):
    def setUp(self):
        reset_action_sources()

    def tearDown(self):
        reset_action_sources()

    def test_builtin_sources_bootstrap(self):
        names = {source.name for source in get_action_sources()}
        self.assertTrue({"Reports", "Users", "Dashboard"}.issubset(names))

    def test_builtin_app_source_is_skipped_by_discovery(self):
        ids = {entry.id for entry in generate_raw_entries(get_action_sources(), MenuDefaults())}
        self.assertNotIn("app", ids)
        self.assertIn("reports-export", ids)
        self.assertNotIn("reports-render-pdf", ids)
        self.assertNotIn("users-login", ids)

    def test_register_overrides_by_case_insensitive_name(self):
        get_action_sources()
        register_action_source("reports", ["index"], {"controllerButton": False})
        reports = [source for source in get_action_sources() if source.name.lower() == "reports"]
        self.assertEqual(len(reports), 1)
        self.assertEqual(list(reports[0].actions), ["index"])

    def test_unregister(self):
        get_action_sources()
        unregister_action_source("Dashboard")
        self.assertNotIn("Dashboard", {source.name for source in get_action_sources()})

    def test_clear_drops_every_source(self):
        get_action_sources()
        clear_action_sources()
        self.assertEqual(get_action_sources(), [])

    def test_register_validates_options(self):
        with self.assertRaises(InvalidSourceOptions):
            register_action_source("Broken", ["index"], {"exclude": "view"})
        with self.assertRaises(ValueError):
            register_action_source("  ", ["index"])


if __name__ == "__main__":
    unittest.main()
