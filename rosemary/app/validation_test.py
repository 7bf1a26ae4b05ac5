"""Unit tests for validation.py."""

import typing
import unittest

from rosemary.app import errors, validation


def valid_payload(**overrides: typing.Any) -> dict[str, typing.Any]:
    """A payload that passes validation, with optional overrides."""
    payload: dict[str, typing.Any] = {
        'name': 'Corner bush',
        'description': 'Big one by the fence',
        'latitude': 37.7749,
        'longitude': -122.4194,
    }
    payload.update(overrides)
    return payload


class TestValidateLocationInput(unittest.TestCase):
    """Tests for validate_location_input."""

    def assert_invalid(
        self, payload: dict[str, typing.Any], field: str
    ) -> errors.ValidationError:
        """Assert the payload fails with a message for the given field."""
        with self.assertRaises(errors.ValidationError) as ctx:
            validation.validate_location_input(payload)
        self.assertIn(field, ctx.exception.details)
        return ctx.exception

    def test_valid_payload(self) -> None:
        """A well-formed payload is normalized into LocationInput."""
        result = validation.validate_location_input(valid_payload())
        self.assertEqual(result.name, 'Corner bush')
        self.assertEqual(result.description, 'Big one by the fence')
        self.assertEqual(result.latitude, 37.7749)
        self.assertEqual(result.longitude, -122.4194)

    def test_strings_are_trimmed(self) -> None:
        """Name and description are trimmed."""
        result = validation.validate_location_input(
            valid_payload(name='  Hedge  ', description='  tall \n')
        )
        self.assertEqual(result.name, 'Hedge')
        self.assertEqual(result.description, 'tall')

    def test_coordinates_coerced_from_strings(self) -> None:
        """Form fields arrive as strings and are coerced to floats."""
        result = validation.validate_location_input(
            valid_payload(latitude=' 12.5 ', longitude='-45')
        )
        self.assertEqual(result.latitude, 12.5)
        self.assertEqual(result.longitude, -45.0)

    def test_integer_coordinates_accepted(self) -> None:
        """JSON integers are accepted as coordinates."""
        result = validation.validate_location_input(valid_payload(latitude=0, longitude=0))
        self.assertEqual((result.latitude, result.longitude), (0.0, 0.0))

    def test_boundary_coordinates_accepted(self) -> None:
        """The range limits themselves are valid."""
        for lat, lon in [(-90, -180), (90, 180), ('90', '-180')]:
            result = validation.validate_location_input(
                valid_payload(latitude=lat, longitude=lon)
            )
            self.assertEqual(abs(result.latitude), 90)
            self.assertEqual(abs(result.longitude), 180)

    def test_latitude_out_of_range(self) -> None:
        """Latitudes outside [-90, 90] are rejected with a field message."""
        for value in (90.0001, -91, '100'):
            exc = self.assert_invalid(valid_payload(latitude=value), 'latitude')
            self.assertEqual(
                exc.details['latitude'], 'Latitude must be between -90 and 90'
            )
            self.assertNotIn('longitude', exc.details)

    def test_longitude_out_of_range(self) -> None:
        """Longitudes outside [-180, 180] are rejected with a field message."""
        for value in (180.5, -181, '-200'):
            exc = self.assert_invalid(valid_payload(longitude=value), 'longitude')
            self.assertEqual(
                exc.details['longitude'], 'Longitude must be between -180 and 180'
            )

    def test_non_numeric_coordinates(self) -> None:
        """Values that are not finite numbers are rejected."""
        for value in ('north', 'nan', 'inf', True, [1]):
            exc = self.assert_invalid(valid_payload(latitude=value), 'latitude')
            self.assertEqual(exc.details['latitude'], 'Latitude must be a number')

    def test_name_length_bounds(self) -> None:
        """Names of 1 to 100 characters (after trimming) are accepted."""
        for name in ('a', 'x' * 100, '  ' + 'y' * 100 + '  '):
            result = validation.validate_location_input(valid_payload(name=name))
            self.assertEqual(len(result.name), len(name.strip()))

    def test_empty_name_rejected(self) -> None:
        """Empty and whitespace-only names are rejected."""
        for name in ('', '   '):
            exc = self.assert_invalid(valid_payload(name=name), 'name')
            self.assertEqual(exc.details['name'], 'Name is required')

    def test_missing_name_rejected(self) -> None:
        """A payload without a name is rejected."""
        payload = valid_payload()
        del payload['name']
        exc = self.assert_invalid(payload, 'name')
        self.assertEqual(exc.details['name'], 'Name is required')

    def test_long_name_rejected(self) -> None:
        """Names over 100 characters are rejected."""
        exc = self.assert_invalid(valid_payload(name='x' * 101), 'name')
        self.assertEqual(exc.details['name'], 'Name must be 100 characters or fewer')

    def test_description_optional(self) -> None:
        """Missing, null and blank descriptions normalize to None."""
        payload = valid_payload()
        del payload['description']
        self.assertIsNone(validation.validate_location_input(payload).description)
        for value in (None, '', '   '):
            result = validation.validate_location_input(valid_payload(description=value))
            self.assertIsNone(result.description)

    def test_long_description_rejected(self) -> None:
        """Descriptions over 500 characters are rejected."""
        validation.validate_location_input(valid_payload(description='d' * 500))
        exc = self.assert_invalid(valid_payload(description='d' * 501), 'description')
        self.assertEqual(
            exc.details['description'], 'Description must be 500 characters or fewer'
        )

    def test_one_message_per_field(self) -> None:
        """Every invalid field gets exactly one string message."""
        exc = self.assert_invalid(
            {'name': '', 'description': 'd' * 600, 'latitude': 'x', 'longitude': 999},
            'name',
        )
        self.assertEqual(
            set(exc.details), {'name', 'description', 'latitude', 'longitude'}
        )
        self.assertTrue(all(isinstance(v, str) for v in exc.details.values()))
        self.assertIsNone(exc.form_error)

    def test_missing_coordinates_adds_form_error(self) -> None:
        """With no coordinates at all a form-level message is attached."""
        exc = self.assert_invalid({'name': 'Bush'}, 'latitude')
        self.assertEqual(exc.form_error, validation.NO_COORDINATES_MESSAGE)
        self.assertEqual(exc.details['form'], validation.NO_COORDINATES_MESSAGE)
        self.assertEqual(exc.details['latitude'], 'Latitude is required')
        self.assertEqual(exc.details['longitude'], 'Longitude is required')

    def test_blank_coordinates_add_form_error(self) -> None:
        """Blank form fields count as missing coordinates."""
        exc = self.assert_invalid(
            valid_payload(latitude='', longitude=' '), 'latitude'
        )
        self.assertEqual(exc.form_error, validation.NO_COORDINATES_MESSAGE)

    def test_one_missing_coordinate_has_no_form_error(self) -> None:
        """Only the missing field is reported when the other is present."""
        payload = valid_payload()
        del payload['longitude']
        exc = self.assert_invalid(payload, 'longitude')
        self.assertIsNone(exc.form_error)
        self.assertNotIn('form', exc.details)


if __name__ == '__main__':
    unittest.main()
