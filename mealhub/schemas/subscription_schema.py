from flask import current_app
from marshmallow import fields, validate, validates_schema, pre_load, ValidationError, EXCLUDE
from mealhub.extensions import ma
from mealhub.schemas.assignment_schema import MealPreferencesSchema
from mealhub.schemas.fields import IsoDate

class GenerateOrdersSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    assignmentId = fields.String(required=True, validate=validate.Length(min=1))
    startDate = IsoDate(required=True)
    endDate = IsoDate(required=True)

    @validates_schema
    def check_range(self, data, **kwargs):
        if data["endDate"] < data["startDate"]:
            raise ValidationError("endDate must be on or after startDate", field_name="endDate")
        max_days = current_app.config.get("SUBSCRIPTION_MAX_GENERATION_DAYS", 92)
        if (data["endDate"] - data["startDate"]).days > max_days:
            raise ValidationError(f"Date range may span at most {max_days} days", field_name="endDate")

class PauseSubscriptionSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    reason = fields.String(required=True, validate=validate.Length(min=1, max=200))

    @pre_load
    def strip_reason(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("reason"), str):
            data = dict(data, reason=data["reason"].strip())
        return data

class UpdatePreferencesSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    preferences = fields.Nested(MealPreferencesSchema, required=True)

generate_orders_schema = GenerateOrdersSchema()
pause_subscription_schema = PauseSubscriptionSchema()
update_preferences_schema = UpdatePreferencesSchema()
