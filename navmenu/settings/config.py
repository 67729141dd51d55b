from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import os


def _get_default_redis_url() -> str:
    """根据环境自动选择Redis URL"""
    if os.getenv("DOCKER_ENV") == "true" or os.path.exists("/.dockerenv"):
        return "redis://redis:6379/0"
    return "redis://localhost:6379/0"


def _default_exclude_actions() -> List[str]:
    return ["view", "edit", "delete", "admin_edit", "admin_delete", "admin_view"]


class Settings(BaseSettings):
    env: str = Field(default="dev")

    # Redis
    redis_url: str = Field(default_factory=_get_default_redis_url)

    # Menu cache
    menu_cache_backend: str = Field(default="redis")  # redis | memory
    menu_cache_key: str = Field(default="menu_storage")
    menu_cache_config: str = Field(default="menu_component")
    menu_cache_ttl_seconds: int = Field(default=86400)

    # Menu discovery
    menu_default_parent: Optional[str] = Field(default=None)
    menu_admin_prefix: Optional[str] = Field(default="admin")
    menu_exclude_actions: List[str] = Field(default_factory=_default_exclude_actions)
    # Methods every action source inherits from the host base class.
    menu_excluded_methods: List[str] = Field(default_factory=list)
    menu_auto_load: bool = Field(default=True)

    # ACL
    menu_acl_path: str = Field(default="controllers/")
    menu_acl_separator: str = Field(default="/")
    acl_rules_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()


def reload_settings() -> Settings:
    global settings
    settings = Settings()
    return settings
