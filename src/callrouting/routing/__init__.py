"""
Call routing package.

Keep package import side-effects to a minimum; import from the submodules.
"""

__all__ = [
    "models",
    "business_hours",
    "mode",
    "engine",
    "context_messages",
    "validation",
    "settings_store",
]
