class EventManagementError(Exception):
    """Base class for failures that are reported back to the caller.

    Each subclass carries a stable ``code`` for clients and the HTTP status
    the error handler answers with.
    """

    code = "ERROR"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"success": False, "message": self.message, "error": self.code}


class ValidationError(EventManagementError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid request data"


class MissingFieldsError(ValidationError):
    def __init__(self, fields):
        super().__init__("Missing required fields")
        self.fields = fields

    def to_dict(self):
        body = super().to_dict()
        body["missing_fields"] = self.fields
        return body


class NotPendingError(EventManagementError):
    code = "NOT_PENDING"
    default_message = "Event is not pending approval"


class NotApprovedError(EventManagementError):
    code = "NOT_APPROVED"
    default_message = "Event is not approved"


class InvalidTransitionError(EventManagementError):
    code = "INVALID_TRANSITION"
    default_message = "Event cannot move to the requested status"


class RegistrationClosedError(EventManagementError):
    code = "REGISTRATION_CLOSED"
    default_message = "Registration for this event is closed"


class EventFullError(EventManagementError):
    code = "EVENT_FULL"
    default_message = "Event is full"


class AlreadyRegisteredError(EventManagementError):
    code = "ALREADY_REGISTERED"
    default_message = "Already registered for this event"


class DuplicateAttendanceError(EventManagementError):
    code = "DUPLICATE_ATTENDANCE"
    default_message = "User has already checked in to this event"


class AuthenticationError(EventManagementError):
    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(EventManagementError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access denied"


class NotFoundError(EventManagementError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class EventNotFoundError(NotFoundError):
    code = "EVENT_NOT_FOUND"
    default_message = "Event not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class RegistrationNotFoundError(NotFoundError):
    code = "REGISTRATION_NOT_FOUND"
    default_message = "Registration not found"


class NotificationNotFoundError(NotFoundError):
    code = "NOTIFICATION_NOT_FOUND"
    default_message = "Notification not found"
