"""Location store operations."""

import logging

import sqlalchemy.exc
import sqlmodel

from .errors import StorageError
from .models import Location
from .validation import LocationInput

logger = logging.getLogger(__name__)


def list_locations(session: sqlmodel.Session) -> list[Location]:
    """Return all locations ordered newest first."""
    statement = sqlmodel.select(Location).order_by(
        Location.created_at.desc(),  # type: ignore[attr-defined]
        Location.id.desc(),  # type: ignore[union-attr]
    )
    try:
        return list(session.exec(statement).all())
    except sqlalchemy.exc.SQLAlchemyError as exc:
        logger.exception('Failed to list locations')
        raise StorageError('Unable to read locations') from exc


def create_location(
    session: sqlmodel.Session,
    data: LocationInput,
    photo_reference: str | None = None,
) -> Location:
    """Persist a validated location and return it with id and created_at set."""
    location = Location(
        name=data.name,
        description=data.description,
        latitude=data.latitude,
        longitude=data.longitude,
        photo_reference=photo_reference,
    )
    try:
        session.add(location)
        session.commit()
        session.refresh(location)
    except sqlalchemy.exc.SQLAlchemyError as exc:
        session.rollback()
        logger.exception('Failed to save location %r', data.name)
        raise StorageError('Unable to save location') from exc

    logger.info(
        'Created location %s %r at (%.6f, %.6f)',
        location.id,
        location.name,
        location.latitude,
        location.longitude,
    )
    return location
