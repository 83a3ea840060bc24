"""
Share payload codec.

A share payload is {"v": schema_version, "a": plugin_id, "s": compact_settings}
serialized as JSON and encoded with URL-safe base64 (padding stripped), so it
can sit in a URL fragment or be pasted from the clipboard.
"""

import base64
import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from gensynth.config import SHARE_SCHEMA_VERSION
from gensynth.utils.logger import logger

from .schema import PluginSettings


@dataclass
class SharePayload:
    plugin_id: str
    settings: PluginSettings = field(default_factory=PluginSettings)
    version: int = SHARE_SCHEMA_VERSION


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    text = text.strip().lstrip("#")
    padding = (-len(text)) % 4
    return base64.urlsafe_b64decode(text + "=" * padding)


def encode_share_payload(plugin_id: str, compact_settings: Optional[Mapping] = None) -> str:
    """Encode a plugin id and its compact settings as a URL-safe string."""
    payload = {
        "v": SHARE_SCHEMA_VERSION,
        "a": plugin_id,
        "s": dict(compact_settings or {}),
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return _b64encode(raw)


def decode_share_payload(text) -> Optional[SharePayload]:
    """
    Decode a share string. Returns None when the payload is unusable;
    unknown or malformed settings entries are dropped silently.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    try:
        data = json.loads(_b64decode(text).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError, RecursionError) as e:
        logger.warning("Ignoring malformed share payload", component="SHARE", details=str(e))
        return None

    if not isinstance(data, Mapping):
        return None
    version = data.get("v")
    if isinstance(version, bool) or version != SHARE_SCHEMA_VERSION:
        logger.warning(f"Ignoring share payload with version {version!r}", component="SHARE")
        return None
    plugin_id = data.get("a")
    if not isinstance(plugin_id, str) or not plugin_id:
        return None

    return SharePayload(plugin_id=plugin_id, settings=PluginSettings.from_compact(data.get("s")))
