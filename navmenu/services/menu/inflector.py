"""Name inflection helpers for action sources and action names."""
from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_SLUG = re.compile(r"[^a-z0-9]+")
_MULTI_UNDERSCORE = re.compile(r"_+")


def underscore(name: str) -> str:
    """``UserGroups`` -> ``user_groups``; ``adminIndex`` -> ``admin_index``."""
    cleaned = _CAMEL_BOUNDARY.sub("_", name.strip())
    cleaned = cleaned.replace("-", "_").replace(" ", "_")
    return _MULTI_UNDERSCORE.sub("_", cleaned).strip("_").lower()


def humanize(name: str) -> str:
    """``admin_index`` -> ``Admin Index``."""
    words = [word for word in underscore(name).split("_") if word]
    return " ".join(word.capitalize() for word in words)


def camelize(name: str) -> str:
    """``user_groups`` / ``userGroups`` -> ``UserGroups``."""
    return "".join(word.capitalize() for word in underscore(name).split("_") if word)


def slug(*parts: object) -> str:
    """Stable, URL- and filesystem-safe id from name parts.

    Each part is underscored first so ``UserGroups`` and ``user_groups`` produce
    the same slug: ``slug("UserGroups", "index") == "user-groups-index"``.
    """
    pieces: list[str] = []
    for part in parts:
        if part is None:
            continue
        text = underscore(str(part))
        text = _NON_SLUG.sub("-", text).strip("-")
        if text:
            pieces.append(text)
    return "-".join(pieces)
