"""
Domain exceptions raised by the order engine and the payment reconciler.

Each exception carries a stable ``code`` so the HTTP layer can map it to a
response without inspecting messages.
"""


class OrderEngineError(Exception):
    """Base exception for order and payment domain errors."""

    code = "error"
    default_message = "The request could not be processed."

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(OrderEngineError):
    """Raised when a referenced order, item, table or dish does not exist."""

    code = "not_found"
    default_message = "The requested resource was not found."


class InvalidStateError(OrderEngineError):
    """Raised when an operation is not legal for the order's current status."""

    code = "invalid_state"
    default_message = "The operation is not allowed in the current state."


class ValidationError(OrderEngineError):
    """Raised for malformed input: empty item lists, bad quantities, unavailable dishes."""

    code = "validation_error"
    default_message = "The request data is invalid."


class ConflictError(OrderEngineError):
    """Raised when a uniqueness rule is violated, e.g. a second open tab for a table."""

    code = "conflict"
    default_message = "The request conflicts with the current state of the resource."


class ExternalServiceError(OrderEngineError):
    """Raised when the payment provider fails or times out."""

    code = "external_service_error"
    default_message = "The payment provider could not complete the request."
