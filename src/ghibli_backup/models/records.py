from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

ResourceKind = Literal["films", "people", "species", "locations", "vehicles"]

RESOURCE_KINDS: tuple[str, ...] = ("films", "people", "species", "locations", "vehicles")
IMAGE_FIELDS: tuple[str, ...] = ("image", "movie_banner")


class BaseRecord(BaseModel):
    """Fields every record of every kind carries.

    Records stay open: unknown keys from the API are preserved as extras so a
    typed view can be dumped back to the exact JSON it was parsed from.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    url: str | None = None


class Film(BaseRecord):
    title: str = ""
    original_title: str | None = None
    original_title_romanised: str | None = None
    image: str | None = None
    movie_banner: str | None = None
    description: str = ""
    director: str | None = None
    producer: str | None = None
    release_date: str | None = None
    running_time: str | None = None
    rt_score: str | None = None
    people: list[str] = []
    species: list[str] = []
    locations: list[str] = []
    vehicles: list[str] = []


class Person(BaseRecord):
    name: str = ""
    gender: str | None = None
    age: str | None = None
    eye_color: str | None = None
    hair_color: str | None = None
    image: str | None = None
    films: list[str] = []
    species: str | None = None


class Species(BaseRecord):
    name: str = ""
    classification: str | None = None
    eye_colors: str | None = None
    hair_colors: str | None = None
    image: str | None = None
    people: list[str] = []
    films: list[str] = []


class Location(BaseRecord):
    name: str = ""
    climate: str | None = None
    terrain: str | None = None
    surface_water: str | None = None
    image: str | None = None
    residents: list[str] = []
    films: list[str] = []


class Vehicle(BaseRecord):
    name: str = ""
    description: str = ""
    vehicle_class: str | None = None
    length: str | None = None
    image: str | None = None
    pilot: str | None = None
    films: list[str] = []


RECORD_MODELS: dict[str, type[BaseRecord]] = {
    "films": Film,
    "people": Person,
    "species": Species,
    "locations": Location,
    "vehicles": Vehicle,
}


def is_resource_kind(kind: str) -> bool:
    return kind in RECORD_MODELS


def parse_record(kind: str, raw: dict[str, Any]) -> BaseRecord:
    model = RECORD_MODELS.get(kind)
    if model is None:
        raise ValueError(f"Unknown resource kind: {kind}")
    return model.model_validate(raw)


def parse_records(kind: str, raw_items: list[dict[str, Any]]) -> list[BaseRecord]:
    return [parse_record(kind, item) for item in raw_items]
