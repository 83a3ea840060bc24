"""
Persisted settings schema.

Storage record (JSON):

    {
        "version": 1,
        "plugins": {
            "<plugin_id>": {
                "params": {"<key>": number | {min, current, max} | {min, max}},
                "functions": {"<key>": {"noiseSpeedIndex": int}}
            }
        }
    }

Compact form (share payloads) drops default values and speed levels of 0:

    {"p": {"<key>": ...}, "f": {"<key>": int}}

Decoding is fail-soft throughout: malformed entries are dropped, never raised.
Values are only shape-checked here; normalization against live definitions
happens when they are applied to the registry.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from gensynth.config import PARAM_SETTINGS_STORAGE_VERSION
from gensynth.params.normalize import is_finite_number


def _clean_param(value: Any) -> Optional[Any]:
    """JSON-safe copy of a persisted value, or None if it has no usable shape."""
    if is_finite_number(value):
        return value
    if isinstance(value, Mapping):
        cleaned = {name: value[name] for name in ("min", "current", "max")
                   if is_finite_number(value.get(name))}
        if "min" in cleaned and "max" in cleaned:
            return cleaned
    return None


def _clean_params(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    params = {}
    for key, value in raw.items():
        cleaned = _clean_param(value)
        if isinstance(key, str) and cleaned is not None:
            params[key] = cleaned
    return params


@dataclass
class PluginSettings:
    """Persisted values and modulation speed levels for one plugin."""
    params: Dict[str, Any] = field(default_factory=dict)
    functions: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "params": dict(self.params),
            "functions": {key: {"noiseSpeedIndex": level}
                          for key, level in self.functions.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PluginSettings":
        if not isinstance(data, Mapping):
            return cls()

        functions = {}
        raw_functions = data.get("functions")
        if isinstance(raw_functions, Mapping):
            for key, entry in raw_functions.items():
                if not isinstance(key, str) or not isinstance(entry, Mapping):
                    continue
                level = entry.get("noiseSpeedIndex")
                if is_finite_number(level):
                    functions[key] = int(level)

        return cls(params=_clean_params(data.get("params")), functions=functions)

    def to_compact(self, defaults: Optional[Mapping] = None) -> dict:
        """Compact form: skips values equal to `defaults` and zero speed levels."""
        defaults = defaults or {}
        params = {key: value for key, value in self.params.items()
                  if key not in defaults or defaults[key] != value}
        functions = {key: level for key, level in self.functions.items() if level}
        compact: Dict[str, Any] = {}
        if params:
            compact["p"] = params
        if functions:
            compact["f"] = functions
        return compact

    @classmethod
    def from_compact(cls, data: Any) -> "PluginSettings":
        if not isinstance(data, Mapping):
            return cls()
        functions = {}
        raw_functions = data.get("f")
        if isinstance(raw_functions, Mapping):
            functions = {key: int(level) for key, level in raw_functions.items()
                         if isinstance(key, str) and is_finite_number(level)}
        return cls(params=_clean_params(data.get("p")), functions=functions)


@dataclass
class SettingsRecord:
    """Versioned envelope covering every visited plugin."""
    version: int = PARAM_SETTINGS_STORAGE_VERSION
    plugins: Dict[str, PluginSettings] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "plugins": {plugin_id: settings.to_dict()
                        for plugin_id, settings in self.plugins.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SettingsRecord":
        """
        Decode a stored record. Anything unexpected (wrong type, unknown
        version, non-mapping plugins) yields an empty record.
        """
        if not isinstance(data, Mapping):
            return cls()
        version = data.get("version")
        if isinstance(version, bool) or version != PARAM_SETTINGS_STORAGE_VERSION:
            return cls()
        raw_plugins = data.get("plugins")
        if not isinstance(raw_plugins, Mapping):
            return cls()
        plugins = {plugin_id: PluginSettings.from_dict(entry)
                   for plugin_id, entry in raw_plugins.items()
                   if isinstance(plugin_id, str) and isinstance(entry, Mapping)}
        return cls(plugins=plugins)
