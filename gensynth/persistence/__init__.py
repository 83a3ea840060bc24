"""
Persistence - settings record, debounced store and share payloads.
"""

from .schema import PluginSettings, SettingsRecord
from .share import SharePayload, decode_share_payload, encode_share_payload
from .store import (
    PluginSettingsStore,
    SelectedPluginStore,
    SettingsStoreError,
    write_json_atomic,
)

__all__ = [
    "PluginSettings",
    "SettingsRecord",
    "SharePayload",
    "decode_share_payload",
    "encode_share_payload",
    "PluginSettingsStore",
    "SelectedPluginStore",
    "SettingsStoreError",
    "write_json_atomic",
]
