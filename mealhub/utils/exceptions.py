class ServiceError(Exception):
    code = "SERVICE_ERROR"
    status = 400

    def __init__(self, message="Service error", details=None, code=None, status=None):
        self.code = code or self.code
        self.status = status or self.status
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidAssignment(ServiceError):
    code = "INVALID_ASSIGNMENT"


class MissingSubscriptionDetails(ServiceError):
    code = "MISSING_SUBSCRIPTION_DETAILS"


class InvalidArgument(ServiceError):
    code = "INVALID_ARGUMENT"


class NoOrdersGenerated(ServiceError):
    code = "NO_ORDERS_GENERATED"
    status = 422


class OrderCreationFailed(ServiceError):
    code = "ORDER_CREATION_FAILED"
    status = 500


class NotPaused(ServiceError):
    code = "NOT_PAUSED"
    status = 409


class PreferencesRejected(ServiceError):
    code = "PREFERENCES_REJECTED"
    status = 409


class PersistenceFailed(ServiceError):
    code = "PERSISTENCE_FAILED"
    status = 500
