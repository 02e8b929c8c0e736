"""A JSON array on disk, shared by the JSON-file repositories."""

from __future__ import annotations

import json
import os
from pathlib import Path

import structlog

from storefront.domain.exceptions import InfrastructureError

logger = structlog.get_logger(__name__)


class JsonFileStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("json_store_read_failed", path=str(self._file_path), error=str(exc))
            raise InfrastructureError(f"Cannot read {self._file_path.name}") from exc

    def persist(self, records: list[dict]) -> None:
        """Replace the file contents; readers see either old or new, never half."""
        tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)
        except OSError as exc:
            logger.error("json_store_write_failed", path=str(self._file_path), error=str(exc))
            raise InfrastructureError(f"Cannot write {self._file_path.name}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def next_numeric_id(records: list[dict]) -> int:
    if not records:
        return 1
    return max(r["id"] for r in records) + 1
