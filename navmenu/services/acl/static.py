"""Rule-table access checks over hierarchical resource paths.

Rules are keyed by principal (``"role:1"``) or ``"*"`` for everyone::

    {"role:1": {"allow": ["controllers"], "deny": ["controllers/Reports/export"]}}

A check walks the resource path from the most specific node up to the root;
the first node with a matching rule decides. Deny wins over allow on the same
node, and a path with no matching node is denied.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Set

from ..menu.principal import Principal

logger = logging.getLogger(__name__)

GLOBAL_SUBJECT = "*"


def _normalize_path(path: str) -> str:
    return "/".join(part for part in path.strip().split("/") if part).lower()


def _ancestors(path: str) -> List[str]:
    parts = _normalize_path(path).split("/")
    return ["/".join(parts[:size]) for size in range(len(parts), 0, -1)]


@dataclass
class _RuleSet:
    allow: Set[str] = field(default_factory=set)
    deny: Set[str] = field(default_factory=set)


@dataclass
class StaticAcl:
    rules: Dict[str, _RuleSet] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Iterable[str]]]) -> "StaticAcl":
        acl = cls()
        for subject, subject_rules in data.items():
            if not isinstance(subject_rules, Mapping):
                raise ValueError(f"acl rules for {subject!r} must be a mapping")
            for path in subject_rules.get("allow", []) or []:
                acl.allow(subject, path)
            for path in subject_rules.get("deny", []) or []:
                acl.deny(subject, path)
        return acl

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticAcl":
        file_path = Path(path)
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"acl rules file {file_path} must contain an object")
        logger.info("acl: loaded rules for %d subjects from %s", len(data), file_path)
        return cls.from_mapping(data)

    def _subject(self, subject: str) -> _RuleSet:
        key = subject.strip().lower()
        return self.rules.setdefault(key, _RuleSet())

    def allow(self, subject: str, path: str) -> None:
        self._subject(subject).allow.add(_normalize_path(path))

    def deny(self, subject: str, path: str) -> None:
        self._subject(subject).deny.add(_normalize_path(path))

    def check(self, principal: Principal | str, resource: str) -> bool:
        subject = Principal.parse(principal).key.lower()
        subjects: List[_RuleSet] = [
            rules for rules in (self.rules.get(subject), self.rules.get(GLOBAL_SUBJECT)) if rules is not None
        ]
        for node in _ancestors(resource):
            if any(node in rules.deny for rules in subjects):
                return False
            if any(node in rules.allow for rules in subjects):
                return True
        return False

    def __call__(self, principal: Principal, resource: str) -> bool:
        return self.check(principal, resource)


def load_acl(path: str | None) -> StaticAcl:
    if not path:
        return StaticAcl()
    return StaticAcl.from_file(path)
