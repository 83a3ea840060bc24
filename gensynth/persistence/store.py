"""
Settings store - durable, debounced persistence of per-plugin settings.

- Reads are fail-soft: missing, corrupt or foreign-version files load as
  an empty record and never raise.
- Writes are atomic (temp file in the same directory, then os.replace) and
  debounced so a drag does not rewrite the file on every move event.
- Write failures are logged and swallowed; the session continues without
  persistence.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from gensynth.utils.logger import logger

from .schema import PluginSettings, SettingsRecord


class SettingsStoreError(Exception):
    """Raised when a settings file cannot be written."""
    pass


class Debouncer(Protocol):
    pending: bool

    def trigger(self, callback: Callable[[], None]) -> None:
        ...

    def cancel(self) -> None:
        ...


def write_json_atomic(dest_path: Path, data) -> None:
    """
    Write JSON to dest_path atomically.

    Raises:
        SettingsStoreError: If the write fails
    """
    dest_path = Path(dest_path)
    try:
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        json_str = json.dumps(data, indent=2)
        fd, temp_path = tempfile.mkstemp(suffix=".tmp", prefix=".settings_", dir=dest_path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json_str)
            os.replace(temp_path, dest_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
    except (OSError, TypeError, ValueError) as e:
        raise SettingsStoreError(f"Failed to write {dest_path}: {e}")


def read_json(path: Path):
    """Read a JSON file, returning None if it is missing or unreadable."""
    path = Path(path)
    try:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.warning(f"Ignoring unreadable settings file {path.name}", component="STORE",
                       details=str(e))
        return None


class PluginSettingsStore:
    """
    Per-plugin settings merged into one versioned record.

    Usage:
        store = PluginSettingsStore(path, debouncer=QtDebouncer())
        store.load()
        store.update("circles", settings)               # debounced
        store.update("circles", settings, immediate=True)
    """

    def __init__(self, path: Optional[Path] = None, debouncer: Optional[Debouncer] = None):
        self.path = Path(path) if path is not None else None
        self._debouncer = debouncer
        self.plugins: Dict[str, PluginSettings] = {}

    @property
    def pending(self) -> bool:
        return bool(self._debouncer is not None and self._debouncer.pending)

    def load(self) -> Dict[str, PluginSettings]:
        """Load the record from disk (fail-soft)."""
        if self.path is None:
            self.plugins = {}
            return self.plugins
        record = SettingsRecord.from_dict(read_json(self.path))
        self.plugins = record.plugins
        logger.store(f"Loaded settings for {len(self.plugins)} plugin(s)")
        return self.plugins

    def get(self, plugin_id: str) -> Optional[PluginSettings]:
        return self.plugins.get(plugin_id)

    def update(self, plugin_id: str, settings: PluginSettings, immediate: bool = False) -> None:
        """Merge one plugin's settings and schedule (or force) a flush."""
        if not plugin_id:
            return
        self.plugins[plugin_id] = settings
        if immediate:
            self.flush()
        else:
            self.schedule_flush()

    def schedule_flush(self) -> None:
        if self._debouncer is None:
            self.flush()
            return
        self._debouncer.trigger(self.flush)

    def cancel_pending(self) -> None:
        if self._debouncer is not None:
            self._debouncer.cancel()

    def flush(self) -> bool:
        """Write the record now. Returns False if nothing was written."""
        self.cancel_pending()
        if self.path is None:
            return False
        record = SettingsRecord(plugins=dict(self.plugins))
        try:
            write_json_atomic(self.path, record.to_dict())
        except SettingsStoreError as e:
            logger.warning("Settings not saved", component="STORE", details=str(e))
            return False
        logger.store(f"Saved settings for {len(self.plugins)} plugin(s)")
        return True


class SelectedPluginStore:
    """Remembers the last selected plugin id (fail-soft)."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None

    def load(self) -> Optional[str]:
        if self.path is None:
            return None
        data = read_json(self.path)
        if isinstance(data, dict) and isinstance(data.get("plugin"), str):
            return data["plugin"] or None
        return None

    def save(self, plugin_id: str) -> bool:
        if self.path is None or not isinstance(plugin_id, str) or not plugin_id:
            return False
        try:
            write_json_atomic(self.path, {"plugin": plugin_id})
        except SettingsStoreError as e:
            logger.warning("Selected plugin not saved", component="STORE", details=str(e))
            return False
        return True
