"""菜单 API"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, Field

from ..contracts import ErrorCode, error_response, success_response
from ..services.acl import load_acl
from ..services.menu import InvalidMenuEntry, MenuService, Principal
from ..settings.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/menu", tags=["menu"])

_SERVICE: Optional[MenuService] = None
_SERVICE_LOCK = threading.Lock()


def get_menu_service() -> MenuService:
    global _SERVICE
    if _SERVICE is not None:
        return _SERVICE
    with _SERVICE_LOCK:
        if _SERVICE is None:
            _SERVICE = MenuService.build_default(can_access=load_acl(settings.acl_rules_file))
    return _SERVICE


def reset_menu_service() -> None:
    global _SERVICE
    with _SERVICE_LOCK:
        _SERVICE = None


class TargetPayload(BaseModel):
    source: str
    action: Optional[str] = None
    admin: Optional[bool] = None
    params: Dict[str, Any] = Field(default_factory=dict)


class MenuEntryPayload(BaseModel):
    id: Optional[str] = None
    parent_id: Optional[str] = None
    title: Optional[str] = None
    target: Optional[TargetPayload] = None
    weight: int = Field(default=0)


def _resolve_principal(principal: Optional[str], header_value: Optional[str]) -> Principal:
    raw = (principal or "").strip() or (header_value or "").strip()
    try:
        return Principal.parse(raw)
    except ValueError as exc:
        raise HTTPException(
            status_code=400,
            detail=error_response(ErrorCode.INVALID_PRINCIPAL, str(exc)),
        ) from exc


@router.get("")
def get_menu(
    principal: Optional[str] = Query(default=None),
    x_principal: Optional[str] = Header(default=None),
    service: MenuService = Depends(get_menu_service),
):
    resolved = _resolve_principal(principal, x_principal)
    tree, context = service.build_menu_with_context(resolved)
    return success_response(
        {"items": [entry.model_dump(mode="json") for entry in tree]},
        meta={
            "principal": resolved.key,
            "cache": "hit" if context.cache_hit else "rebuilt",
        },
    )


@router.post("/entries")
def add_menu_entry(payload: MenuEntryPayload, service: MenuService = Depends(get_menu_service)):
    try:
        entry = service.add_entry(payload.model_dump(exclude_none=True))
    except InvalidMenuEntry as exc:
        logger.warning("menu: rejected manual entry: %s", exc)
        raise HTTPException(
            status_code=400,
            detail=error_response(ErrorCode.INVALID_INPUT, str(exc)),
        ) from exc
    return success_response(entry.model_dump(mode="json"))


@router.get("/raw")
def list_raw_entries(service: MenuService = Depends(get_menu_service)):
    entries = service.get_raw_entries()
    return success_response(
        {"items": [entry.model_dump(mode="json") for entry in entries], "total": len(entries)}
    )


@router.delete("/cache")
def clear_menu_cache(service: MenuService = Depends(get_menu_service)):
    cleared = service.clear_raw_cache()
    logger.info("menu: raw cache cleared=%s", cleared)
    return success_response({"cleared": cleared})
