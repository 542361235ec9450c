# services/persistence.py
"""
JSON persistence for the pet engine.

- Uses Kivy's App to place save files under the app's user_data_dir.
- Falls back to a local ./.userdata directory when no app is running.
- Writes are atomic: data is written to a temporary file in the same directory
  and then os.replace() swaps it into place.
- Besides the pet snapshot it keeps a memorial list of past pets and a small
  profile (last daily bonus claim).
"""

from __future__ import annotations

import json
import os
from tempfile import NamedTemporaryFile
from typing import Any, Dict, List, Optional

from kivy.app import App  # Only Kivy import allowed here
from kivy.logger import Logger

from services.state import PetEngine
from services.tuning import Session


class Persistence:
    """JSON-backed persistence layer for PetEngine with atomic writes."""

    def __init__(self, base_dir: Optional[str] = None) -> None:
        """Initialize and cache the save directory (explicit dir wins over the app's)."""
        self._base_dir: str = base_dir or self._compute_dir()

    @staticmethod
    def _compute_dir() -> str:
        """Compute the save directory based on running Kivy app or local fallback."""
        app = App.get_running_app()
        if app is not None and getattr(app, "user_data_dir", None):
            return app.user_data_dir
        return os.path.join(".", Session.FALLBACK_DIR)

    def path_for(self, filename: str) -> str:
        """Return the path of `filename` and ensure its directory exists."""
        os.makedirs(self._base_dir, exist_ok=True)
        return os.path.join(self._base_dir, filename)

    # --- Low-level JSON helpers ---
    def _write_json(self, filename: str, payload: Any) -> bool:
        temp_name: Optional[str] = None
        try:
            path = self.path_for(filename)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=os.path.dirname(path),
                prefix=".save-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                temp_name = tmp.name
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(temp_name, path)
            return True
        except (OSError, TypeError, ValueError) as exc:
            Logger.warning(f"Persistence: could not write {filename}: {exc}")
            if temp_name and os.path.exists(temp_name):
                try:
                    os.remove(temp_name)
                except OSError as cleanup_exc:
                    Logger.warning(f"Persistence: could not remove {temp_name}: {cleanup_exc}")
            return False

    def _read_json(self, filename: str) -> Any:
        """Parsed JSON of `filename`, or None if missing or unreadable."""
        try:
            path = self.path_for(filename)
            if not os.path.exists(path):
                return None
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            Logger.warning(f"Persistence: could not read {filename}: {exc}")
            return None

    # --- Pet snapshot ---
    def save(self, engine: PetEngine) -> bool:
        """
        Persist the engine's current snapshot.

        Nothing is written before a pet has been adopted.

        Returns:
            bool: True on success, False if skipped or any error occurs.
        """
        data = engine.snapshot()
        if not data.get("adopted"):
            return False
        return self._write_json(Session.SAVE_FILE, data)

    def load(self, engine: PetEngine) -> bool:
        """
        Load the saved snapshot into the engine.

        If the file is missing, unreadable, not adopted or invalid, the engine
        is left unchanged and False is returned.
        """
        data = self._read_json(Session.SAVE_FILE)
        if not isinstance(data, dict):
            return False
        try:
            return engine.load_snapshot(data)
        except (TypeError, ValueError) as exc:
            Logger.warning(f"Persistence: ignoring invalid save: {exc}")
            return False

    # --- Memorials ---
    def load_memorials(self) -> List[Dict[str, Any]]:
        data = self._read_json(Session.MEMORIAL_FILE)
        return [m for m in data if isinstance(m, dict)] if isinstance(data, list) else []

    def archive_memorial(self, record: Dict[str, Any]) -> bool:
        """Append a dead pet's record to the memorial list."""
        memorials = self.load_memorials()
        memorials.append(dict(record))
        return self._write_json(Session.MEMORIAL_FILE, memorials)

    # --- Profile ---
    def load_profile(self) -> Dict[str, Any]:
        data = self._read_json(Session.PROFILE_FILE)
        return data if isinstance(data, dict) else {}

    def save_profile(self, profile: Dict[str, Any]) -> bool:
        return self._write_json(Session.PROFILE_FILE, dict(profile))
