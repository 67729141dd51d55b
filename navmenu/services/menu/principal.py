from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union
from urllib.parse import quote


@dataclass(frozen=True)
class Principal:
    """Identity a menu is built for: a type tag plus an identifier."""

    kind: str
    identifier: Union[str, int]

    @property
    def key(self) -> str:
        return f"{self.kind}:{self.identifier}"

    def cache_token(self) -> str:
        """Store-safe token, distinct for every distinct ``(kind, identifier)`` pair.

        Both parts are percent-encoded as-is (case kept), so ``:`` only ever
        appears as the separator.
        """
        return f"{quote(str(self.kind), safe='')}:{quote(str(self.identifier), safe='')}"

    @classmethod
    def parse(cls, value: Union["Principal", str, Mapping[str, Any]]) -> "Principal":
        """Accept ``"role:1"``, a bare alias, or ``{"Role": {"id": 1}}``."""
        if isinstance(value, Principal):
            return value
        if isinstance(value, Mapping):
            if len(value) != 1:
                raise ValueError("principal mapping must have exactly one kind")
            kind, payload = next(iter(value.items()))
            if isinstance(payload, Mapping):
                if "id" not in payload:
                    raise ValueError(f"principal {kind!r} has no id")
                payload = payload["id"]
            return cls(kind=str(kind).strip().lower(), identifier=payload)
        text = str(value or "").strip()
        if not text:
            raise ValueError("principal is required")
        if ":" in text:
            kind, identifier = text.split(":", 1)
            if not kind.strip() or not identifier.strip():
                raise ValueError(f"malformed principal: {text!r}")
            return cls(kind=kind.strip().lower(), identifier=identifier.strip())
        return cls(kind="alias", identifier=text)
