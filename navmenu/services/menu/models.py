from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from .errors import InvalidSourceOptions


class MenuTarget(BaseModel):
    """Structured locator of the action an entry points at."""

    source: str
    action: Optional[str] = None
    admin: Optional[bool] = None
    params: Dict[str, Any] = Field(default_factory=dict)


class MenuEntry(BaseModel):
    id: str
    parent_id: Optional[str] = None
    title: Optional[str] = None
    target: Optional[MenuTarget] = None
    weight: int = 0
    children: List["MenuEntry"] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_cache(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_cache(cls, payload: Mapping[str, Any]) -> "MenuEntry":
        return cls.model_validate(payload)


MenuEntry.model_rebuild()


class SourceOptions(BaseModel):
    """Per action-source menu configuration.

    Accepts the legacy ``menuOptions`` key ``controllerButton`` for
    ``emit_group_entry``. An ``exclude`` containing ``"*"`` hides the source.
    """

    exclude: List[StrictStr] = Field(default_factory=list)
    alias: Dict[StrictStr, StrictStr] = Field(default_factory=dict)
    parent: Optional[StrictStr] = None
    emit_group_entry: StrictBool = Field(default=True, alias="controllerButton")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @classmethod
    def from_value(cls, value: Union["SourceOptions", Mapping[str, Any], None]) -> "SourceOptions":
        if value is None:
            return cls()
        if isinstance(value, SourceOptions):
            return value
        if not isinstance(value, Mapping):
            raise InvalidSourceOptions(f"menu options must be a mapping, got {type(value).__name__}")
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise InvalidSourceOptions(f"invalid menu options: {exc}") from exc


@dataclass(slots=True)
class ActionSource:
    name: str
    actions: Sequence[str] = field(default_factory=list)
    options: SourceOptions = field(default_factory=SourceOptions)

    @classmethod
    def declare(
        cls,
        name: str,
        actions: Sequence[str],
        options: Union[SourceOptions, Mapping[str, Any], None] = None,
    ) -> "ActionSource":
        if isinstance(actions, str) or not isinstance(actions, Sequence):
            raise InvalidSourceOptions(f"actions of source {name!r} must be a list of names")
        return cls(name=name, actions=list(actions), options=SourceOptions.from_value(options))


@dataclass(slots=True)
class BuildContext:
    """State threaded through one build cycle."""

    force_rebuild: bool = False
    raw_changed: bool = False
    cache_hit: bool = False
