from .cache import MenuCacheManager
from .errors import InvalidMenuEntry, InvalidSourceOptions, MenuError
from .models import ActionSource, BuildContext, MenuEntry, MenuTarget, SourceOptions
from .normalizer import generate_raw_entries, normalize_source
from .options import EffectiveOptions, MenuDefaults, merge_source_options
from .permissions import filter_entries, resource_id
from .principal import Principal
from .service import MenuService, build_menu_service
from .store import MemoryCacheStore, RedisCacheStore, build_cache_store
from .tree import assemble_tree, flatten_tree

__all__ = [
    "ActionSource",
    "BuildContext",
    "EffectiveOptions",
    "InvalidMenuEntry",
    "InvalidSourceOptions",
    "MemoryCacheStore",
    "MenuCacheManager",
    "MenuDefaults",
    "MenuEntry",
    "MenuError",
    "MenuService",
    "MenuTarget",
    "Principal",
    "RedisCacheStore",
    "SourceOptions",
    "assemble_tree",
    "build_cache_store",
    "build_menu_service",
    "filter_entries",
    "flatten_tree",
    "generate_raw_entries",
    "merge_source_options",
    "normalize_source",
    "resource_id",
]
