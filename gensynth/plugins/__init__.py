"""
Plugin catalog.
"""

from .arcs import ArcsPlugin
from .base import (
    InitContext,
    InitResult,
    InvalidPluginError,
    Plugin,
    RunContext,
    validate_plugin,
)
from .circles import CirclesPlugin
from .ink import INK_PARAMETER_DEFS, INK_PARAMETER_KEYS, resolve_ink_style

PLUGINS = [CirclesPlugin(), ArcsPlugin()]
PLUGINS_BY_ID = {plugin.id: plugin for plugin in PLUGINS}


def get_plugin(plugin_id, default=None):
    return PLUGINS_BY_ID.get(plugin_id, default)


__all__ = [
    "ArcsPlugin",
    "CirclesPlugin",
    "INK_PARAMETER_DEFS",
    "INK_PARAMETER_KEYS",
    "InitContext",
    "InitResult",
    "InvalidPluginError",
    "PLUGINS",
    "PLUGINS_BY_ID",
    "Plugin",
    "RunContext",
    "get_plugin",
    "resolve_ink_style",
    "validate_plugin",
]
