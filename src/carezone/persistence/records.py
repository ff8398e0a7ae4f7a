"""Plain-dict records for persisting service zones."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..models.domain import Point, ServiceZone, ZoneKind, ZoneStyle, utcnow


def zone_to_record(zone: ServiceZone) -> dict[str, Any]:
    return {
        "id": zone.id,
        "name": zone.name,
        "kind": zone.kind.value,
        "boundary": [[point.latitude, point.longitude] for point in zone.boundary],
        "style": {
            "fill_color": zone.style.fill_color,
            "stroke_color": zone.style.stroke_color,
            "fill_opacity": zone.style.fill_opacity,
            "stroke_weight": zone.style.stroke_weight,
        },
        "applicable_services": sorted(zone.applicable_services),
        "active": zone.active,
        "created_at": zone.created_at.isoformat(),
        "updated_at": zone.updated_at.isoformat(),
    }


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        return datetime.fromisoformat(str(value))
    return utcnow()


def zone_from_record(record: dict[str, Any]) -> ServiceZone:
    kind = ZoneKind(record.get("kind", ZoneKind.DELIVERY.value))
    style_data = record.get("style") or {}
    style = ZoneStyle(**style_data) if style_data else ZoneStyle.for_kind(kind)
    return ServiceZone(
        id=str(record["id"]),
        name=record.get("name", ""),
        kind=kind,
        boundary=tuple(Point(float(lat), float(lon)) for lat, lon in record["boundary"]),
        style=style,
        applicable_services=frozenset(record.get("applicable_services") or ()),
        active=bool(record.get("active", True)),
        created_at=_parse_timestamp(record.get("created_at")),
        updated_at=_parse_timestamp(record.get("updated_at")),
    )
