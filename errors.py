"""
Error Types

Every failure the API reports is an ApiError carrying an HTTP status and a
message. The global handlers in main.py turn them into {"error": message}.
"""
from typing import Optional


class ApiError(Exception):
    """Base exception for all client-facing API errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> dict:
        return {"error": self.message}


class ValidationError(ApiError):
    """A request body field is missing or invalid."""

    status_code = 400


class NotFoundError(ApiError):
    """The record named by the route id is not in the store."""

    status_code = 404


class RouteIdMismatchError(ApiError):
    """The id in the request body differs from the id in the route."""

    status_code = 404


class StatePreconditionError(ApiError):
    """The stored record is in a state that forbids the operation."""


class MethodNotAllowedError(ApiError):
    status_code = 405

    def __init__(self, method: str, path: str):
        super().__init__(f"{method} not allowed for {path}")


class PathNotFoundError(ApiError):
    status_code = 404

    def __init__(self, path: str):
        super().__init__(f"Path not found: {path}")
