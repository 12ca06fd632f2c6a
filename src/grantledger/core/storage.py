"""
GrantLedger - Persistent State Storage

Provides reliable persistence of the token state with:
- Atomic writes (temp file + rename)
- SHA-256 checksum verification on load
- Schema validation of the loaded state
- One rolling backup of the previous state file
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
import time
from threading import Lock
from typing import Any, Dict

from .exceptions import CorruptedStateError, StorageError
from .schemas import STATE_VERSION, validate_state

logger = logging.getLogger(__name__)


class LedgerStorage:
    """
    State file storage for a single token.

    The file holds ``{"metadata": {...}, "state": {...}}``; the metadata
    carries the checksum of the canonical JSON encoding of ``state``.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        self.backup_path = self.path + ".bak"
        self.lock = Lock()

    @staticmethod
    def _canonical(state: Dict[str, Any]) -> str:
        return json.dumps(state, indent=2, sort_keys=True)

    def _calculate_checksum(self, data: str) -> str:
        return hashlib.sha256(data.encode("utf-8")).hexdigest()

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def save(self, state: Dict[str, Any], create_backup: bool = True) -> str:
        """
        Save state with an atomic write.

        Returns:
            Checksum of the saved state

        Raises:
            StorageError: If the file could not be written
        """
        with self.lock:
            state_json = self._canonical(state)
            checksum = self._calculate_checksum(state_json)
            metadata = {
                "timestamp": time.time(),
                "checksum": checksum,
                "version": STATE_VERSION,
            }
            package_json = json.dumps({"metadata": metadata, "state": state}, indent=2, sort_keys=True)

            temp_file = self.path + ".tmp"
            try:
                directory = os.path.dirname(self.path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                if create_backup and os.path.exists(self.path):
                    shutil.copy2(self.path, self.backup_path)

                with open(temp_file, "w", encoding="utf-8") as f:
                    f.write(package_json)
                    f.flush()
                    os.fsync(f.fileno())  # Force write to disk

                os.replace(temp_file, self.path)
            except OSError as e:
                logger.error(
                    "Failed to save ledger state",
                    extra={"event": "storage.save_failed", "path": self.path, "error": str(e)},
                )
                if os.path.exists(temp_file):
                    os.remove(temp_file)
                raise StorageError(f"Failed to save ledger state: {e}", details={"path": self.path}) from e

            logger.info(
                "Ledger state saved",
                extra={"event": "storage.saved", "path": self.path, "checksum": checksum[:8]},
            )
            return checksum

    def load(self) -> Dict[str, Any]:
        """
        Load and verify state.

        Raises:
            StorageError: If there is no state file or it can't be read
            CorruptedStateError: If the checksum or schema check fails
        """
        with self.lock:
            if not os.path.exists(self.path):
                raise StorageError("No ledger state file found", details={"path": self.path})

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    package = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning(
                    "JSON decode error during state load",
                    extra={"event": "storage.decode_error", "path": self.path, "error": str(e)},
                )
                raise CorruptedStateError(f"State file is not valid JSON: {e}", details={"path": self.path}) from e
            except OSError as e:
                raise StorageError(f"Failed to read ledger state: {e}", details={"path": self.path}) from e

            if not isinstance(package, dict) or "state" not in package:
                raise CorruptedStateError("State file has no state section", details={"path": self.path})

            metadata = package.get("metadata") or {}
            state = package["state"]
            expected_checksum = metadata.get("checksum")
            actual_checksum = self._calculate_checksum(self._canonical(state))
            if expected_checksum != actual_checksum:
                logger.warning(
                    "Checksum verification failed",
                    extra={"event": "storage.checksum_mismatch", "path": self.path},
                )
                raise CorruptedStateError(
                    "Checksum verification failed",
                    details={"path": self.path, "expected": expected_checksum, "actual": actual_checksum},
                )

            return validate_state(state)
