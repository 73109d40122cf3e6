"""Domain errors raised by the notification pipeline."""

from __future__ import annotations

from http import HTTPStatus

REQUEST_BODY_REQUIRED = "Request body required"
WEBHOOK_NOT_FOUND = "Webhook not found"
ROOM_UNDEFINED = "Room undefined"
CHATWORK_REQUEST_FAILURE = "Chatwork request failure"


class NotifierError(Exception):
    """Base error carrying the HTTP status the web layer answers with."""

    status: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ConfigurationError(NotifierError):
    status = HTTPStatus.CONFLICT


class ValidationError(NotifierError):
    status = HTTPStatus.BAD_REQUEST


class DeliveryRejected(NotifierError):
    """Chatwork refused the message (bad credentials or malformed request)."""

    status = HTTPStatus.BAD_REQUEST
