"""Error hierarchy for the webhook tools.

Every error carries the HTTP-style status and the caller-safe message that
end up in the response envelope. Services raise these; the route layer turns
them into responses.
"""


class ToolError(Exception):
    """Base exception for all tool failures."""

    status = 500
    message = "An unexpected error occurred. Please try again later."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self):
        return {"status": self.status, "message": self.message}


# ── 400: the request itself is wrong ──

class ValidationError(ToolError):
    status = 400
    message = "Invalid request."


class InvalidIdentity(ValidationError):
    message = 'Invalid x-identity format. Use "email:<email>" or "phone:<phone>".'


class MissingSecret(ValidationError):
    message = 'Missing PIN. Provide it either in the "pin" header, query parameter, or request body.'


class MissingFields(ValidationError):
    message = "Missing required fields."


class InvalidDateFormat(ValidationError):
    message = "Invalid date format. Please use YYYY-MM-DD format."


class InvalidStudentName(ValidationError):
    message = "Please provide both first and last name of the student."


class InvalidPhoneFormat(ValidationError):
    message = "Invalid phone number format. Please use E.164 format (e.g., +1234567890)."


class NotPhoneCapable(ValidationError):
    message = "SMS can only be sent to phone numbers. Please provide a phone number in x-identity."


class InvalidQueryValue(ValidationError):
    """A value could not be placed safely into a store filter."""

    message = "Request contains characters that are not allowed."


class InvalidRequest(ValidationError):
    message = "Invalid request"


# ── 401 ──

class Unauthorized(ToolError):
    """Identity or PIN did not match. Never says which one."""

    status = 401
    message = "Invalid credentials. Please check your identity and PIN."


# ── 404: nothing matched ──

class NotFound(ToolError):
    status = 404
    message = "Not found."


class GuardianNotFound(NotFound):
    message = "Guardian not found."


class StudentNotFound(NotFound):
    message = "Student not found."


class NoStudentsFound(NotFound):
    message = "No students found for this guardian."


class TripNotFound(NotFound):
    message = "Field trip not found."


class NoTripsFound(NotFound):
    message = "No upcoming field trips found for your students' grades."


class NoAbsencesFound(NotFound):
    message = "No absence records found."


# ── 500: configuration and upstream failures ──

class ConfigurationError(ToolError):
    message = "Configuration error. Please check environment variables."


class StoreOperationFailed(ToolError):
    """Record store request failed or returned nothing."""


class ProviderError(ToolError):
    """Messaging/telephony provider request failed."""


class HandoffFailed(ToolError):
    message = "Failed to hand over to a human agent"


class UnexpectedError(ToolError):
    pass
