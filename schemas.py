from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


def _coerce_id(v: Any) -> Optional[str]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, str)):
        s = str(v).strip()
        return s or None
    return None


def _coerce_labels(v: Any) -> list[str]:
    if not isinstance(v, (list, tuple, set, frozenset)):
        return []
    return [s for s in v if isinstance(s, str) and s]


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)

    @classmethod
    def parse(cls, value: Any) -> Optional[GeoPoint]:
        """
        Lenient constructor: returns None for anything that is not a point
        with finite numeric lat/lng. No range checks on purpose, the
        distance formula handles any finite angle.
        """
        if isinstance(value, GeoPoint):
            return value
        if not isinstance(value, Mapping):
            return None
        lat, lng = value.get("lat"), value.get("lng")
        for v in (lat, lng):
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                return None
        try:
            return cls(lat=lat, lng=lng)
        except ValidationError:
            return None


class User(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    location: Optional[GeoPoint] = None
    preferences: FrozenSet[str] = frozenset()
    attended_events: Tuple[str, ...] = Field(default=(), alias="attendedEvents")

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> Optional[str]:
        return _coerce_id(v)

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v: Any) -> Optional[GeoPoint]:
        return GeoPoint.parse(v)

    @field_validator("preferences", mode="before")
    @classmethod
    def _preferences(cls, v: Any) -> list[str]:
        return _coerce_labels(v)

    @field_validator("attended_events", mode="before")
    @classmethod
    def _attended(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple, set, frozenset)):
            return []
        return [i for i in (_coerce_id(x) for x in v) if i]


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str = ""
    categories: Tuple[str, ...] = ()
    location: Optional[GeoPoint] = None
    popularity: float = Field(0.0, ge=0.0, le=1.0, description="clamped to [0,1]")

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> Optional[str]:
        return _coerce_id(v)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else ""

    @field_validator("categories", mode="before")
    @classmethod
    def _categories(cls, v: Any) -> list[str]:
        return _coerce_labels(v)

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v: Any) -> Optional[GeoPoint]:
        return GeoPoint.parse(v)

    @field_validator("popularity", mode="before")
    @classmethod
    def _popularity(cls, v: Any) -> float:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0.0
        if math.isnan(v):
            return 0.0
        return max(0.0, min(1.0, float(v)))
