"""
Failure types for registration operations.

Each error carries a stable ``code`` that callers switch on to pick the
user-facing message; services convert them into result dicts at the boundary.
"""


class RegistrationError(Exception):
    code = "error"
    default_message = "Something went wrong, please try again"

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_result(self):
        result = {"success": False, "error": self.code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class NotFound(RegistrationError):
    code = "not_found"
    default_message = "Not found"


class CapacityExceeded(RegistrationError):
    code = "full"
    default_message = "Tournament is full"


class Unauthorized(RegistrationError):
    code = "unauthorized"
    default_message = "Unauthorized"


class ValidationFailure(RegistrationError):
    code = "validation"
    default_message = "Invalid registration data"


class InvalidTransition(ValidationFailure):
    code = "invalid_transition"
    default_message = "Only pending registrations can be approved or rejected"


class StorageFailure(RegistrationError):
    code = "storage"
    default_message = "Could not save your request, please try again"
