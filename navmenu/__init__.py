"""ACL-gated navigation menus with a two-tier cache."""

__version__ = "0.1.0"
