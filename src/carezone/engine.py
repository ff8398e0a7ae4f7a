"""Wiring of the zone, geocoding and routing services for one application instance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .persistence.database import SupabaseZoneSync
from .persistence.filesystem import FileStorage, FileZoneStore
from .services.geocoding import GeocodingAdapter, GeocodingProvider, get_provider
from .services.interaction.controller import ZoneInteractionController
from .services.interaction.rendering import GeoJSONOverlaySurface
from .services.routing.osrm_client import DirectionsProvider, OSRMClient
from .services.routing.planner import RoutePlanner
from .services.routing.tariff import Tariff
from .services.zones.registry import ZoneRegistry

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    registry: ZoneRegistry
    surface: GeoJSONOverlaySurface
    controller: ZoneInteractionController
    tariff: Tariff = field(default_factory=Tariff.from_settings)
    geocoding_provider: Optional[GeocodingProvider] = None
    directions_provider: Optional[DirectionsProvider] = None

    def geocoder(self) -> GeocodingAdapter:
        """A fresh adapter per caller; only the provider is shared."""

        if self.geocoding_provider is None:
            self.geocoding_provider = get_provider()
        return GeocodingAdapter(self.geocoding_provider)

    def planner(self) -> RoutePlanner:
        if self.directions_provider is None:
            self.directions_provider = OSRMClient()
        return RoutePlanner(self.directions_provider, self.tariff)


def build_engine(
    *,
    data_root: Path | None = None,
    persist: bool = True,
    geocoding_provider: GeocodingProvider | None = None,
    directions_provider: DirectionsProvider | None = None,
    tariff: Tariff | None = None,
) -> Engine:
    registry = ZoneRegistry()
    if persist:
        file_store = FileZoneStore(FileStorage(root=data_root))
        zones = file_store.load_zones()
        database = SupabaseZoneSync()
        if database.configured:
            # Zones stored in Supabase take precedence over the local snapshot.
            remote = database.load_zones()
            if remote:
                zones = remote
                file_store.replace(remote)
        registry.load(zones)
        registry.add_listener(file_store)
        if database.configured:
            registry.add_listener(database)
            logger.info(f"Zone changes will be synced to Supabase table '{database.table}'")

    surface = GeoJSONOverlaySurface()
    surface.sync(registry.snapshot())
    controller = ZoneInteractionController(registry, surface)
    return Engine(
        registry=registry,
        surface=surface,
        controller=controller,
        tariff=tariff or Tariff.from_settings(),
        geocoding_provider=geocoding_provider,
        directions_provider=directions_provider,
    )
