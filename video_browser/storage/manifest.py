"""
Manifest Store for the Video Browser.

The manifest is a JSON list of video entries (path, disabled flag, thumbnail URL and
optional codec) shared with the browser client. This module reads and rewrites it.
"""

import os
import json
import logging
import tempfile
import threading
from typing import Any, Dict, List, Optional
from pathlib import Path


class ManifestStore:
    """Reads and writes the video manifest file"""

    def __init__(self, manifest_path: str):
        self.manifest_path = manifest_path
        self.logger = logging.getLogger(__name__)

        # Serializes read-modify-write cycles; plain reads go straight to disk
        self._write_lock = threading.Lock()

    def load(self) -> List[Dict[str, Any]]:
        """Load manifest entries from disk"""
        try:
            if not os.path.exists(self.manifest_path):
                return []

            with open(self.manifest_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            if not isinstance(data, list):
                self.logger.error(f"Manifest {self.manifest_path} is not a list, ignoring it")
                return []

            return [entry for entry in data if isinstance(entry, dict) and isinstance(entry.get("path"), str) and entry["path"]]

        except Exception as e:
            self.logger.error(f"Error loading manifest {self.manifest_path}: {e}")
            return []

    def save(self, entries: List[Dict[str, Any]]) -> None:
        """Write manifest entries to disk atomically"""
        manifest_dir = Path(self.manifest_path).parent
        manifest_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".manifest-", suffix=".json", dir=str(manifest_dir))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2)
            os.replace(tmp_path, self.manifest_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_by_index(self, index: int) -> Optional[Dict[str, Any]]:
        entries = self.load()
        if 0 <= index < len(entries):
            return entries[index]
        return None

    def find_by_path(self, path: str) -> Optional[Dict[str, Any]]:
        for entry in self.load():
            if entry["path"] == path:
                return entry
        return None

    def set_disabled(self, path: str, disabled: bool) -> bool:
        """Update the disabled flag of one entry, False if the path is unknown"""
        with self._write_lock:
            entries = self.load()
            for entry in entries:
                if entry["path"] == path:
                    entry["disabled"] = disabled
                    self.save(entries)
                    self.logger.info(f"Set disabled={disabled} for {path}")
                    return True

        self.logger.warning(f"Video not found in manifest: {path}")
        return False

    def replace(self, entries: List[Dict[str, Any]]) -> None:
        """Replace the whole manifest"""
        with self._write_lock:
            self.save(entries)
        self.logger.info(f"Manifest written with {len(entries)} videos")

    def disabled_flags(self) -> Dict[str, bool]:
        return {entry["path"]: bool(entry.get("disabled", False)) for entry in self.load()}

    def known_codecs(self) -> Dict[str, str]:
        return {entry["path"]: entry["codec"] for entry in self.load() if entry.get("codec")}
