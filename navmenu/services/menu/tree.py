from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set

from .models import MenuEntry


def _sort_siblings(entries: List[MenuEntry]) -> List[MenuEntry]:
    # sorted() is stable, equal weights keep their input order
    return sorted(entries, key=lambda entry: entry.weight)


def assemble_tree(entries: Iterable[MenuEntry]) -> List[MenuEntry]:
    """Link flat, access-filtered entries into sorted root entries.

    Duplicate ids keep the first occurrence. Entries whose parent is not in the
    input are dropped with their subtree.
    """
    by_id: Dict[str, MenuEntry] = {}
    child_ids: Dict[str, List[str]] = {}
    root_ids: List[str] = []

    for entry in entries:
        if entry.id in by_id:
            continue
        by_id[entry.id] = entry
        if entry.parent_id:
            child_ids.setdefault(entry.parent_id, []).append(entry.id)
        else:
            root_ids.append(entry.id)

    visiting: Set[str] = set()

    def materialize(entry_id: str) -> Optional[MenuEntry]:
        if entry_id in visiting:
            return None
        visiting.add(entry_id)
        children = []
        for child_id in child_ids.get(entry_id, []):
            child = materialize(child_id)
            if child is not None:
                children.append(child)
        visiting.discard(entry_id)
        return by_id[entry_id].model_copy(update={"children": _sort_siblings(children)})

    roots = [materialize(entry_id) for entry_id in root_ids]
    return _sort_siblings([root for root in roots if root is not None])


def flatten_tree(tree: Iterable[MenuEntry]) -> List[MenuEntry]:
    """Depth-first list of every entry in a tree, children cleared."""
    out: List[MenuEntry] = []
    for entry in tree:
        out.append(entry.model_copy(update={"children": []}))
        out.extend(flatten_tree(entry.children))
    return out
