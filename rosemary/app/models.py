"""Database models for rosemary spots."""

import datetime

import sqlmodel

from .validation import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH


class Location(sqlmodel.SQLModel, table=True):
    """A community-submitted rosemary spot.

    Rows are append-only: the app creates them and never updates or deletes.
    """

    __tablename__ = 'locations'  # type: ignore[misc]

    id: int | None = sqlmodel.Field(default=None, primary_key=True)
    name: str = sqlmodel.Field(max_length=NAME_MAX_LENGTH)
    description: str | None = sqlmodel.Field(
        default=None, max_length=DESCRIPTION_MAX_LENGTH
    )
    latitude: float
    longitude: float
    photo_reference: str | None = None
    created_at: datetime.datetime = sqlmodel.Field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC), index=True
    )
