from marshmallow import fields, ValidationError

from mealhub.services.delivery_schedule import parse_calendar_date
from mealhub.utils.exceptions import InvalidArgument


class IsoDate(fields.Field):
    """Calendar date accepted as any ISO-8601 date or datetime string."""

    def _serialize(self, value, attr, obj, **kwargs):
        return value.isoformat() if value is not None else None

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_calendar_date(value, attr)
        except InvalidArgument as e:
            raise ValidationError(e.message)
