"""Supabase persistence collaborator for service zones."""

from __future__ import annotations

import logging
from typing import Any

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import ServiceZone
from ..services.export.geojson import polygon_to_wkt, wkt_to_ring
from ..services.geometry.rings import validate_ring
from .records import zone_from_record, zone_to_record

logger = logging.getLogger(__name__)


def zone_to_row(zone: ServiceZone) -> dict[str, Any]:
    row = zone_to_record(zone)
    row["geometry_wkt"] = polygon_to_wkt(zone.boundary)
    return row


def zone_from_row(row: dict[str, Any]) -> ServiceZone:
    record = dict(row)
    if not record.get("boundary") and record.get("geometry_wkt"):
        record["boundary"] = [point.as_tuple() for point in wkt_to_ring(record["geometry_wkt"])]
    return zone_from_record(record)


class SupabaseZoneSync:
    """Lifecycle listener writing zone mutations to a Supabase table.

    Failures are logged; the in-memory registry has already committed.
    """

    def __init__(self, client=None, table: str | None = None) -> None:
        self.client = client if client is not None else get_supabase_client()
        self.table = table or settings.zones_table

    @property
    def configured(self) -> bool:
        return self.client is not None

    def load_zones(self) -> list[ServiceZone]:
        if not self.client:
            logger.info("Supabase not configured - no zones loaded from database")
            return []
        try:
            response = self.client.table(self.table).select("*").order("created_at").execute()
        except Exception as exc:
            logger.warning(f"Failed to load zones from database: {exc}")
            return []
        zones = []
        for row in response.data or []:
            try:
                zone = zone_from_row(row)
                validate_ring(zone.boundary)
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping malformed zone row {row.get('id')}: {e}")
                continue
            zones.append(zone)
        logger.info(f"Loaded {len(zones)} zone(s) from Supabase table '{self.table}'")
        return zones

    def on_zone_created(self, zone: ServiceZone) -> None:
        if not self.client:
            return
        try:
            self.client.table(self.table).insert(zone_to_row(zone)).execute()
        except Exception as exc:
            logger.warning(f"Failed to save zone {zone.id} to database: {exc}")

    def on_zone_updated(self, zone: ServiceZone) -> None:
        if not self.client:
            return
        row = zone_to_row(zone)
        row.pop("id")
        row.pop("created_at")
        try:
            self.client.table(self.table).update(row).eq("id", zone.id).execute()
        except Exception as exc:
            logger.warning(f"Failed to update zone {zone.id} in database: {exc}")

    def on_zone_deleted(self, zone_id: str) -> None:
        if not self.client:
            return
        try:
            self.client.table(self.table).delete().eq("id", zone_id).execute()
        except Exception as exc:
            logger.warning(f"Failed to delete zone {zone_id} from database: {exc}")
