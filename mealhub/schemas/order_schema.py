from marshmallow import fields
from mealhub.extensions import ma

class OrderSchema(ma.Schema):
    id = fields.String()
    user_id = fields.String(data_key="userId")
    chef_id = fields.String(data_key="chefId")
    assignment_id = fields.String(data_key="assignmentId")
    food_name = fields.String(data_key="foodName")
    description = fields.String()
    quantity = fields.Integer()
    number_of_persons = fields.Integer(data_key="numberOfPersons")
    scheduled_date = fields.Date(data_key="scheduledDate")
    scheduled_time = fields.String(data_key="scheduledTime")
    delivery_address = fields.Raw(data_key="deliveryAddress")
    estimated_price = fields.Float(data_key="estimatedPrice")
    status = fields.String()
    cancel_reason = fields.String(data_key="cancelReason")
    cancelled_by = fields.String(data_key="cancelledBy")
    order_type = fields.String(data_key="orderType")
    subscription_order = fields.Raw(data_key="subscriptionOrder")
    created_at = fields.DateTime(data_key="createdAt")

class OrderCandidateSchema(ma.Schema):
    """An order that was scheduled but could not be written."""
    food_name = fields.String(data_key="foodName")
    scheduled_date = fields.Date(data_key="scheduledDate")
    delivery_day = fields.String(data_key="deliveryDay")
    week_number = fields.Integer(data_key="weekNumber")

order_schema = OrderSchema()
orders_schema = OrderSchema(many=True)
candidate_schema = OrderCandidateSchema()
