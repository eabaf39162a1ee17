from marshmallow import fields, validate, EXCLUDE
from mealhub.extensions import ma
from mealhub.models.assignment import ASSIGNMENT_TYPES, PLAN_TYPES, WEEKDAYS

def _person(person):
    if person is None:
        return None
    return {"id": person.id, "name": person.full_name, "email": person.email}

class AssignmentSchema(ma.Schema):
    id = fields.String()
    user = fields.Function(lambda a: _person(a.user))
    chef = fields.Function(lambda a: _person(a.chef))
    assignment_type = fields.String(data_key="assignmentType")
    status = fields.String()
    subscription_details = fields.Raw(data_key="subscriptionDetails")
    start_date = fields.DateTime(data_key="startDate")
    end_date = fields.DateTime(data_key="endDate")
    notes = fields.String()
    total_orders = fields.Integer(data_key="totalOrders")
    total_amount = fields.Float(data_key="totalAmount")
    last_order_date = fields.DateTime(data_key="lastOrderDate")
    created_at = fields.DateTime(data_key="createdAt")

class MealPreferencesSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    cuisines = fields.List(fields.String(validate=validate.Length(max=50)))
    dietaryRestrictions = fields.List(fields.String(validate=validate.Length(max=50)))
    allergies = fields.List(fields.String(validate=validate.Length(max=50)))

class SubscriptionDetailsSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    planType = fields.String(required=True, validate=validate.OneOf(PLAN_TYPES))
    mealsPerWeek = fields.Integer(required=True, validate=validate.Range(min=1, max=21))
    deliveryDays = fields.List(
        fields.String(validate=validate.OneOf(WEEKDAYS)),
        load_default=list,
        validate=validate.Length(max=7),
    )
    mealPreferences = fields.Nested(MealPreferencesSchema, load_default=dict)

class CreateAssignmentSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    userId = fields.String(required=True)
    chefId = fields.String(required=True)
    assignmentType = fields.String(load_default="individual", validate=validate.OneOf(ASSIGNMENT_TYPES))
    subscriptionDetails = fields.Nested(SubscriptionDetailsSchema, load_default=None, allow_none=True)
    endDate = fields.DateTime(load_default=None, allow_none=True)
    notes = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=500))

assignment_schema = AssignmentSchema()
assignments_schema = AssignmentSchema(many=True)
create_assignment_schema = CreateAssignmentSchema()
