from .static import StaticAcl, load_acl

__all__ = ["StaticAcl", "load_acl"]
