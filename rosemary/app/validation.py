"""Validation of submitted location data."""

import math
import typing
from collections.abc import Mapping

import pydantic
import pydantic_core

from .errors import ValidationError

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

NO_COORDINATES_MESSAGE = (
    'Select a location on the map or use your current location before saving.'
)

_REQUIRED_MESSAGES = {
    'name': 'Name is required',
    'latitude': 'Latitude is required',
    'longitude': 'Longitude is required',
}

_BOUNDS = {
    'latitude': 90.0,
    'longitude': 180.0,
}


def _fail(error_type: str, message: str) -> typing.NoReturn:
    raise pydantic_core.PydanticCustomError(error_type, message)


class LocationInput(pydantic.BaseModel):
    """A normalized, validated location submission."""

    model_config = pydantic.ConfigDict(str_strip_whitespace=True)

    name: str
    description: str | None = None
    latitude: float
    longitude: float

    @pydantic.field_validator('name', mode='before')
    @classmethod
    def _check_name(cls, value: typing.Any) -> str:
        if not isinstance(value, str) or not value.strip():
            _fail('name_required', _REQUIRED_MESSAGES['name'])
        value = value.strip()
        if len(value) > NAME_MAX_LENGTH:
            _fail(
                'name_too_long',
                f'Name must be {NAME_MAX_LENGTH} characters or fewer',
            )
        return value

    @pydantic.field_validator('description', mode='before')
    @classmethod
    def _check_description(cls, value: typing.Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            _fail('description_type', 'Description must be text')
        value = value.strip()
        if not value:
            return None
        if len(value) > DESCRIPTION_MAX_LENGTH:
            _fail(
                'description_too_long',
                f'Description must be {DESCRIPTION_MAX_LENGTH} characters or fewer',
            )
        return value

    @pydantic.field_validator('latitude', 'longitude', mode='before')
    @classmethod
    def _check_coordinate(
        cls, value: typing.Any, info: pydantic.ValidationInfo
    ) -> float:
        field = typing.cast(str, info.field_name)
        label = field.capitalize()
        bound = _BOUNDS[field]

        if value is None:
            _fail('coordinate_required', _REQUIRED_MESSAGES[field])
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool):
            _fail('coordinate_type', f'{label} must be a number')
        if isinstance(value, str):
            value = value.strip()
            if not value:
                _fail('coordinate_required', _REQUIRED_MESSAGES[field])
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            _fail('coordinate_type', f'{label} must be a number')
        if not math.isfinite(number):
            _fail('coordinate_type', f'{label} must be a number')
        if not -bound <= number <= bound:
            _fail(
                'coordinate_range',
                f'{label} must be between {-bound:g} and {bound:g}',
            )
        return number


def _field_errors(exc: pydantic.ValidationError) -> dict[str, str]:
    """Collapse pydantic errors to the first message per field."""
    details: dict[str, str] = {}
    for error in exc.errors():
        field = str(error['loc'][0]) if error['loc'] else 'form'
        if field in details:
            continue
        if error['type'] == 'missing':
            details[field] = _REQUIRED_MESSAGES.get(field, 'This field is required')
        else:
            details[field] = error['msg']
    return details


def _is_blank(value: typing.Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_location_input(payload: Mapping[str, typing.Any]) -> LocationInput:
    """Validate a loosely typed payload from a form or JSON body.

    Raises:
        ValidationError: with one message per invalid field. When neither
            coordinate was supplied a form-level message is attached too.
    """
    try:
        return LocationInput.model_validate(
            {key: payload[key] for key in LocationInput.model_fields if key in payload}
        )
    except pydantic.ValidationError as exc:
        form_error = None
        if _is_blank(payload.get('latitude')) and _is_blank(payload.get('longitude')):
            form_error = NO_COORDINATES_MESSAGE
        raise ValidationError(_field_errors(exc), form_error=form_error) from None
