"""
Domain models for the plant catalog.

`Plant` mirrors the documents served by the remote plant service (camelCase
keys) and the rows of the local `plants` table (snake_case columns); both
spellings are accepted on input.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Plant(BaseModel):
    """
    A single plant as shown in the catalog.
    """

    plant_id: str = Field(..., description="Stable identifier used by the sort order.")
    name: str = Field(..., description="Display name; tie-break key when sorting.")
    description: str = Field("", description="Free-form HTML description.")
    grow_zone_number: int = Field(..., description="USDA grow zone the plant belongs to.")
    watering_interval: int = Field(7, description="Days between waterings.")
    image_url: str = Field("", description="Remote image location.")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def __str__(self) -> str:
        return self.name


class GrowZone(BaseModel):
    """
    Categorical partition key used to filter plants.
    """

    number: int

    model_config = ConfigDict(frozen=True)


NO_GROW_ZONE = GrowZone(number=-1)


__all__ = ["Plant", "GrowZone", "NO_GROW_ZONE"]
