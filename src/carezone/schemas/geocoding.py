"""Geocoding response schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..models.domain import GeocodeCandidate
from .zones import PointModel


class AddressComponentModel(BaseModel):
    long_name: str
    short_name: str
    types: List[str]


class GeocodeCandidateModel(BaseModel):
    formatted_address: str
    coordinate: PointModel
    external_place_id: str
    address_components: List[AddressComponentModel]

    @classmethod
    def from_domain(cls, candidate: GeocodeCandidate) -> "GeocodeCandidateModel":
        return cls(
            formatted_address=candidate.formatted_address,
            coordinate=PointModel.from_domain(candidate.coordinate),
            external_place_id=candidate.external_place_id,
            address_components=[
                AddressComponentModel(
                    long_name=component.long_name,
                    short_name=component.short_name,
                    types=list(component.types),
                )
                for component in candidate.address_components
            ],
        )


class GeocodeResponse(BaseModel):
    query: str
    candidates: List[GeocodeCandidateModel]


class SuggestResponse(BaseModel):
    query: str
    suggestions: List[str]
