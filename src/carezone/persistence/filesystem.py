"""File-based persistence of the zone registry."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import settings
from ..models.domain import ServiceZone
from .records import zone_from_record, zone_to_record

logger = logging.getLogger(__name__)


class FileStorage:
    """Thin wrapper around the data root for storing JSON outputs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.zones_root = self.root / "zones"
        self.zones_root.mkdir(parents=True, exist_ok=True)

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
        tmp_path.replace(path)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)


class FileZoneStore:
    """Lifecycle listener that mirrors the registry into ``zones/zones.json``."""

    filename = "zones.json"

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.path = self.storage.zones_root / self.filename
        self._records: dict[str, dict[str, Any]] = {}
        if self.path.exists():
            self._records = {record["id"]: record for record in self.storage.read_json(self.path)}

    def load_zones(self) -> list[ServiceZone]:
        return [zone_from_record(record) for record in self._records.values()]

    def replace(self, zones: list[ServiceZone]) -> None:
        """Overwrite the local snapshot, e.g. with zones loaded from the database."""
        self._records = {zone.id: zone_to_record(zone) for zone in zones}
        self._flush()

    def _flush(self) -> None:
        self.storage.write_json(self.path, list(self._records.values()))

    def on_zone_created(self, zone: ServiceZone) -> None:
        self._records[zone.id] = zone_to_record(zone)
        self._flush()

    def on_zone_updated(self, zone: ServiceZone) -> None:
        self._records[zone.id] = zone_to_record(zone)
        self._flush()

    def on_zone_deleted(self, zone_id: str) -> None:
        if self._records.pop(zone_id, None) is None:
            logger.warning(f"Deleted zone {zone_id} was not in the file snapshot")
        self._flush()
