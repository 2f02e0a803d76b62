"""Errors raised by the service layer.

Each carries the HTTP status the API answers with; the handlers in
app/api/errors.py turn them into `{"message": ...}` responses.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class SlotUnavailableError(ServiceError):
    status_code = 400


class InvalidStatusTransition(ServiceError):
    status_code = 400


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409
