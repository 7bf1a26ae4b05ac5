"""Rosemary spots application - map page and locations API."""

import contextlib
import logging
import pathlib
from collections.abc import AsyncGenerator

import fastapi
import fastapi.responses
import fastapi.staticfiles
import sqlmodel

import common.app

from . import database, geo, routes, services
from .errors import InvalidBodyError, StorageError, UploadError, ValidationError

APP_DIR = pathlib.Path(__file__).resolve().parent

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the database on startup."""
    database.create_db_and_tables()
    yield


app = common.app.create_app('Rosemary Spots', lifespan=lifespan)

app.mount(
    '/static',
    fastapi.staticfiles.StaticFiles(directory=APP_DIR / 'static'),
    name='static',
)

templates = common.app.make_templates(APP_DIR / 'templates')

# The client uses /api/locations; /locations is kept as the bare API path
app.include_router(routes.router)
app.include_router(routes.router, prefix='/api')
app.include_router(routes.uploads_router)


# ---------------------------------------------------------------------------
# Error responses
# ---------------------------------------------------------------------------


@app.exception_handler(ValidationError)
async def validation_error_handler(
    request: fastapi.Request, exc: ValidationError
) -> fastapi.responses.JSONResponse:
    """Report field-level validation failures."""
    return fastapi.responses.JSONResponse(
        status_code=400,
        content={'error': 'Validation failed', 'details': exc.details},
    )


@app.exception_handler(InvalidBodyError)
async def invalid_body_handler(
    request: fastapi.Request, exc: InvalidBodyError
) -> fastapi.responses.JSONResponse:
    """Report a request body that could not be parsed."""
    return fastapi.responses.JSONResponse(status_code=400, content={'error': str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(
    request: fastapi.Request, exc: StorageError
) -> fastapi.responses.JSONResponse:
    """Report a failed read or write against the location store."""
    logger.error('%s %s failed: %s', request.method, request.url.path, exc)
    return fastapi.responses.JSONResponse(status_code=500, content={'error': str(exc)})


@app.exception_handler(UploadError)
async def upload_error_handler(
    request: fastapi.Request, exc: UploadError
) -> fastapi.responses.JSONResponse:
    """Report a photo that could not be stored; no location was created."""
    logger.error('%s %s failed: %s', request.method, request.url.path, exc)
    return fastapi.responses.JSONResponse(
        status_code=500, content={'error': 'Unable to upload photo'}
    )


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@app.get('/', response_class=fastapi.responses.HTMLResponse)
async def index(
    request: fastapi.Request,
    lat: str | None = None,
    lng: str | None = None,
    session: sqlmodel.Session = fastapi.Depends(database.get_session),
) -> fastapi.responses.HTMLResponse:
    """Map page with the list of spots, nearest first when lat/lng are given."""
    origin = routes.parse_origin_query(lat, lng)
    locations = services.list_locations(session)
    if origin is not None:
        locations = geo.sort_by_distance(locations, origin)

    entries = [
        {
            **routes.serialize_location(loc),
            'distanceKm': geo.distance_from(origin, loc),
        }
        for loc in locations
    ]
    return templates.TemplateResponse(
        request=request,
        name='index.html.jinja2',
        context={'locations': entries, 'origin': origin},
    )
