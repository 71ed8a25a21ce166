# COMPONENT: CATALOG SCHEMAS AND DATA MODELS
# REQUIREMENTS SATISFIED: explicit validated record types for films, directors and snapshots
"""
src/cinetech/schemas/models.py

Defines the Pydantic models used throughout the catalog engine and its
HTTP surface.

Input payloads (FilmIn, DirectorIn) carry the per-field constraints that
form the single validation boundary for create and update operations.
Stored records (Film, Director) are typed but unconstrained, so a
snapshot written by an older client can still be decoded and inspected
before anything is committed.

Field names serialize in camelCase (directorId, createdAt, exportedAt)
to stay compatible with snapshot files produced by the browser client.

Key responsibilities:
    - Define film and director input and stored record schemas
    - Define the snapshot document and candidate catalog shapes
    - Define aggregate result shapes returned by the query engine
    - Define the command results of the confirmation protocol
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_POSTER = "https://via.placeholder.com/300x450?text=Poster+not+available"
UNKNOWN_DIRECTOR_ID = 0
SNAPSHOT_VERSION = "1.0"


# ----------------------------------------------------------------------
# Directors
# ----------------------------------------------------------------------


class DirectorIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, examples=["Christopher Nolan"])
    nationality: str = ""
    birthdate: str = Field("", description="ISO date, e.g. 1970-07-30")
    bio: str = ""


class Director(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    nationality: Optional[str] = ""
    birthdate: Optional[str] = ""
    bio: Optional[str] = ""


# ----------------------------------------------------------------------
# Films
# ----------------------------------------------------------------------


class FilmIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    # Numbers are strict: booleans and numeric strings are rejected, ints are accepted as ratings
    title: str = Field(..., min_length=1, examples=["Inception"])
    director_id: int = Field(UNKNOWN_DIRECTOR_ID, alias="directorId", ge=0, strict=True)
    year: int = Field(..., strict=True, examples=[2010])
    genre: str = ""
    duration: int = Field(..., ge=0, strict=True, description="Minutes")
    rating: float = Field(..., ge=0.0, le=10.0, allow_inf_nan=False, strict=True)
    poster: Optional[str] = Field(None, validate_default=True)
    synopsis: str = ""

    @field_validator("poster")
    @classmethod
    def _default_poster(cls, value: Optional[str]) -> str:
        return value or PLACEHOLDER_POSTER


class Film(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    title: str
    director_id: int = Field(UNKNOWN_DIRECTOR_ID, alias="directorId")
    year: int
    genre: str = ""
    duration: int = 0
    rating: float = 0.0
    poster: str = PLACEHOLDER_POSTER
    synopsis: Optional[str] = ""
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ----------------------------------------------------------------------
# Snapshots
# ----------------------------------------------------------------------


class Catalog(BaseModel):
    """Candidate catalog decoded from a snapshot, not yet committed."""

    films: List[Film] = Field(default_factory=list)
    directors: List[Director] = Field(default_factory=list)


class Snapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    films: List[Film]
    directors: List[Director]
    exported_at: datetime = Field(..., alias="exportedAt")
    version: str = SNAPSHOT_VERSION


# ----------------------------------------------------------------------
# Aggregates
# ----------------------------------------------------------------------


class LabelCount(BaseModel):
    label: str
    count: int


class DirectorStats(BaseModel):
    count: int
    # None when the director has no films
    average_rating: Optional[float] = None


class DirectorRow(BaseModel):
    director: Director
    film_count: int
    average_rating: Optional[float] = None


class DashboardKpis(BaseModel):
    films: int
    directors: int
    average_rating: float
    total_duration_hours: int


class QuickStats(BaseModel):
    oldest_year: Optional[int] = None
    newest_year: Optional[int] = None
    average_duration: Optional[int] = None
    genre_count: int = 0


class StorageUsage(BaseModel):
    used_bytes: int
    quota_bytes: int
    percent_used: float

    @field_validator("percent_used")
    @classmethod
    def _cap(cls, value: float) -> float:
        if math.isnan(value):
            return 0.0
        return min(value, 100.0)


# ----------------------------------------------------------------------
# External metadata previews
# ----------------------------------------------------------------------


class ExternalCandidate(BaseModel):
    imdb_id: str
    title: str
    year: str
    director: str
    genre: str
    runtime: str
    rating: str
    language: str
    country: str
    poster: str
    synopsis: str


# ----------------------------------------------------------------------
# Confirmation protocol
# ----------------------------------------------------------------------


class ConfirmationRequired(BaseModel):
    status: Literal["confirmation_required"] = "confirmation_required"
    action: str
    target_ids: List[int] = Field(default_factory=list)
    label: str
    dependents: int = 0
    current_films: Optional[int] = None
    current_directors: Optional[int] = None
    incoming_films: Optional[int] = None
    incoming_directors: Optional[int] = None


class CommandDone(BaseModel):
    status: Literal["done"] = "done"
    action: str
    affected: int = 0


# Required in some Pydantic v2 setups when using __future__.annotations.
Catalog.model_rebuild()
Snapshot.model_rebuild()
DirectorRow.model_rebuild()
