"""API routes for listing and submitting rosemary spots."""

import json
import logging
import math
import pathlib
import typing

import fastapi
import fastapi.responses
import sqlmodel
import starlette.datastructures

from . import database, geo, models, services, storage, validation
from .errors import InvalidBodyError

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix='/locations')
uploads_router = fastapi.APIRouter(prefix=f'/{storage.UPLOADS_PREFIX}')

# Any other content type is parsed as JSON
FORM_CONTENT_TYPES = ('multipart/form-data', 'application/x-www-form-urlencoded')


class PhotoUpload(typing.NamedTuple):
    """A non-empty photo read from a submitted form."""

    content: bytes
    filename: str | None
    content_type: str | None


def serialize_location(location: models.Location) -> dict[str, typing.Any]:
    """Render a location in its public JSON shape."""
    return {
        'id': location.id,
        'name': location.name,
        'description': location.description,
        'latitude': location.latitude,
        'longitude': location.longitude,
        'createdAt': location.created_at.isoformat(),
        'photoUrl': storage.photo_url(location.photo_reference),
    }


def _parse_finite(*raw: str | None) -> list[float] | None:
    if not all(raw):
        return None
    try:
        values = [float(typing.cast(str, v)) for v in raw]
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in values):
        return None
    return values


def parse_origin_query(lat: str | None, lng: str | None) -> geo.Coordinates | None:
    """Return (lat, lng) when both params are finite numbers."""
    values = _parse_finite(lat, lng)
    if values is None:
        return None
    return values[0], values[1]


def parse_radius_query(
    lat: str | None, lng: str | None, radius: str | None
) -> tuple[geo.Coordinates, float] | None:
    """Return (origin, radius_km) when all three params are finite numbers."""
    values = _parse_finite(lat, lng, radius)
    if values is None:
        return None
    return (values[0], values[1]), values[2]


@router.get('')
async def list_locations(
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    session: sqlmodel.Session = fastapi.Depends(database.get_session),
) -> dict[str, list[dict[str, typing.Any]]]:
    """List all spots, optionally limited to a radius (km) around lat/lng."""
    locations = services.list_locations(session)

    query = parse_radius_query(lat, lng, radius)
    if query is not None:
        origin, radius_km = query
        total = len(locations)
        locations = geo.filter_by_radius(locations, origin, radius_km)
        logger.debug(
            'Radius %.3f km around %s kept %d of %d locations',
            radius_km,
            origin,
            len(locations),
            total,
        )

    return {'locations': [serialize_location(loc) for loc in locations]}


async def _read_form(
    request: fastapi.Request,
) -> tuple[dict[str, typing.Any], PhotoUpload | None]:
    """Collect text fields and read the photo before the form is closed."""
    async with request.form() as form:
        payload: dict[str, typing.Any] = {}
        for key in ('name', 'description', 'latitude', 'longitude'):
            value = form.get(key)
            if isinstance(value, str):
                payload[key] = value

        photo = form.get('photo')
        if not isinstance(photo, starlette.datastructures.UploadFile):
            return payload, None
        content = await photo.read()
        if not content:
            return payload, None
        return payload, PhotoUpload(content, photo.filename, photo.content_type)


async def _read_json(request: fastapi.Request) -> dict[str, typing.Any]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidBodyError('Invalid JSON body') from None
    if not isinstance(payload, dict):
        raise InvalidBodyError('Invalid JSON body')
    return typing.cast(dict[str, typing.Any], payload)


@router.post('', status_code=201)
async def create_location(
    request: fastapi.Request,
    session: sqlmodel.Session = fastapi.Depends(database.get_session),
    photo_storage: storage.PhotoStorage = fastapi.Depends(storage.get_photo_storage),
) -> dict[str, dict[str, typing.Any]]:
    """Create a spot from a form (optionally with a photo) or a JSON body."""
    content_type = request.headers.get('content-type', '').lower()
    photo: PhotoUpload | None = None
    if content_type.startswith(FORM_CONTENT_TYPES):
        payload, photo = await _read_form(request)
    else:
        payload = await _read_json(request)

    data = validation.validate_location_input(payload)

    photo_reference: str | None = None
    if photo is not None:
        photo_reference = await photo_storage.save(
            photo.content, photo.filename, photo.content_type
        )

    location = services.create_location(session, data, photo_reference)
    return {'location': serialize_location(location)}


@uploads_router.get('/{filename}')
async def get_uploaded_photo(
    filename: str,
    photo_storage: storage.PhotoStorage = fastapi.Depends(storage.get_photo_storage),
) -> fastapi.responses.FileResponse:
    """Serve a photo kept in the local blob area."""
    if not isinstance(photo_storage, storage.LocalPhotoStorage):
        raise fastapi.HTTPException(status_code=404, detail='Photo not found')
    if pathlib.PurePath(filename).name != filename or filename.startswith('.'):
        raise fastapi.HTTPException(status_code=404, detail='Photo not found')

    file_path = photo_storage.upload_dir / filename
    if not file_path.is_file():
        raise fastapi.HTTPException(status_code=404, detail='Photo not found')
    return fastapi.responses.FileResponse(file_path)
