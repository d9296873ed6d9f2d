"""
ICP Configuration Store
=======================
Persistence for the scoring configuration edited through the ICP editor.

Configurations are validated before they are accepted; an invalid one never
replaces the active configuration. With a path the configuration is kept as
a JSON file and reloaded only when the file's mtime changes; without one it
lives in memory.
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Optional, Tuple

from .models.scoring_config import (
    ScoringConfig,
    create_default_scoring_config,
    validate_scoring_config,
)

logger = logging.getLogger(__name__)

SOURCE_SAVED = "saved"
SOURCE_DEFAULT = "default"


class ConfigStore:
    """
    Holds the saved ICP configuration, falling back to the default profile.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or None
        self._lock = threading.Lock()
        self._saved: Optional[ScoringConfig] = None
        self._last_modified: Optional[str] = None
        self._mtime: Optional[float] = None

    def load(self) -> Tuple[ScoringConfig, str, Optional[str]]:
        """
        Current configuration.

        Returns:
            (config, source, last_modified) where source is "saved" or
            "default" and last_modified is an ISO timestamp or None
        """
        with self._lock:
            if self.path:
                self._refresh_from_disk()
            if self._saved is not None:
                return self._saved, SOURCE_SAVED, self._last_modified
        return create_default_scoring_config(), SOURCE_DEFAULT, None

    def save(self, config: ScoringConfig) -> str:
        """
        Validate and store a configuration.

        Raises:
            ScoringConfigError: if the configuration breaks an invariant

        Returns:
            ISO timestamp of the write
        """
        validate_scoring_config(config)
        now = datetime.now(timezone.utc).isoformat()

        with self._lock:
            if self.path:
                payload = {
                    "config": config.model_dump(mode="json", by_alias=True),
                    "last_modified": now,
                }
                with open(self.path, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                self._mtime = os.path.getmtime(self.path)
            self._saved = config
            self._last_modified = now

        logger.info("ICP configuration saved: %s", config.name)
        return now

    def reset(self):
        """Drop the saved configuration; the default profile applies again"""
        with self._lock:
            if self.path and os.path.exists(self.path):
                os.remove(self.path)
            self._saved = None
            self._last_modified = None
            self._mtime = None
        logger.info("ICP configuration reset to defaults")

    def _refresh_from_disk(self):
        if not os.path.exists(self.path):
            self._saved, self._last_modified, self._mtime = None, None, None
            return

        mtime = os.path.getmtime(self.path)
        if self._mtime == mtime:
            return

        with open(self.path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        config = validate_scoring_config(ScoringConfig.model_validate(payload["config"]))
        self._saved = config
        self._last_modified = payload.get("last_modified")
        self._mtime = mtime
