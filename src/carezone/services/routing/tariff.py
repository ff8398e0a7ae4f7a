"""Linear tariff converting route distance into an estimated fare."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import settings


@dataclass(frozen=True, slots=True)
class Tariff:
    minimum_fare: float
    per_km_rate: float
    currency: str = "INR"

    def __post_init__(self) -> None:
        if self.minimum_fare < 0 or self.per_km_rate < 0:
            raise ValueError("Tariff values must be non-negative.")

    @classmethod
    def from_settings(cls) -> "Tariff":
        return cls(
            minimum_fare=settings.minimum_fare,
            per_km_rate=settings.per_km_rate,
            currency=settings.currency,
        )

    def estimate(self, distance_meters: float) -> float:
        distance_km = max(distance_meters, 0.0) / 1000.0
        return round(max(self.minimum_fare, distance_km * self.per_km_rate), 2)
