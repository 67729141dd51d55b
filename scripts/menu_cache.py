#!/usr/bin/env python3
"""Inspect or reset the shared menu cache.

    python scripts/menu_cache.py clear
    python scripts/menu_cache.py show role:1
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from navmenu.services.acl import load_acl  # noqa: E402
from navmenu.services.menu import MenuService  # noqa: E402
from navmenu.settings.config import settings  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Menu cache maintenance")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("clear", help="delete the shared raw menu cache")
    show = sub.add_parser("show", help="print the menu tree built for a principal")
    show.add_argument("principal", help='principal as "kind:id", e.g. role:1')
    show.add_argument("--acl-file", default=settings.acl_rules_file, help="JSON ACL rules file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "clear":
        service = MenuService.build_default()
        cleared = service.clear_raw_cache()
        print(json.dumps({"cleared": cleared}))
        return 0

    service = MenuService.build_default(can_access=load_acl(args.acl_file))
    tree, context = service.build_menu_with_context(args.principal)
    print(
        json.dumps(
            {
                "principal": args.principal,
                "cache": "hit" if context.cache_hit else "rebuilt",
                "items": [entry.model_dump(mode="json") for entry in tree],
            },
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
