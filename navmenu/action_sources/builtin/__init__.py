"""Built-in action sources. Each module exposes ``ACTION_SOURCE``."""
