from typing import Optional

from fastapi import HTTPException, status


class HealthMateError(Exception):
    """
    Base class for failures that reach the user.

    `code` is stable and machine-readable; `user_message` is the friendly
    text shown in the chat bubble, toast or inline banner. The exception's
    own str() is the technical diagnostic and is only ever logged.
    """

    code = "error"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: str = "", *, user_message: Optional[str] = None):
        super().__init__(detail or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class ValidationError(HealthMateError):
    code = "validation_error"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    user_message = "Please check your input and try again."


class AuthRequired(HealthMateError):
    code = "auth_required"
    http_status = status.HTTP_401_UNAUTHORIZED
    user_message = "Please sign in to continue."


# --------------------
# Geolocation
# --------------------

class PermissionDenied(HealthMateError):
    code = "permission_denied"
    http_status = status.HTTP_403_FORBIDDEN
    user_message = "Location access was denied. Enter your city or area instead."


class Unsupported(HealthMateError):
    code = "unsupported"
    http_status = status.HTTP_400_BAD_REQUEST
    user_message = "Your location is not available. Enter your city or area instead."


class GeolocationTimeout(HealthMateError):
    code = "timeout"
    http_status = status.HTTP_408_REQUEST_TIMEOUT
    user_message = "Finding your location took too long. Enter your city or area instead."


class NotFound(HealthMateError):
    code = "not_found"
    http_status = status.HTTP_404_NOT_FOUND
    user_message = "We couldn't find that place. Try a nearby city or a more specific name."


# --------------------
# Transient / upstream
# --------------------

class NetworkError(HealthMateError):
    code = "network_error"
    http_status = status.HTTP_502_BAD_GATEWAY
    user_message = "We're having trouble connecting right now. Please try again."


class RateLimited(HealthMateError):
    code = "rate_limited"
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    user_message = "Too many requests right now. Please try again later."


class QuotaExhausted(HealthMateError):
    code = "quota_exhausted"
    http_status = status.HTTP_402_PAYMENT_REQUIRED
    user_message = "The health assistant is unavailable at the moment. Please try again later."


class UpstreamError(HealthMateError):
    code = "upstream_error"
    http_status = status.HTTP_502_BAD_GATEWAY
    user_message = (
        "Sorry, I couldn't process your health question right now. "
        "Please try again later or contact support."
    )


class BackendError(HealthMateError):
    code = "backend_error"
    http_status = status.HTTP_502_BAD_GATEWAY
    user_message = "Sorry, we couldn't load this right now. Please try again."


class Conflict(HealthMateError):
    code = "conflict"
    http_status = status.HTTP_409_CONFLICT
    user_message = "This request conflicts with the current state. Please refresh and try again."


def to_http_exception(exc: HealthMateError) -> HTTPException:
    headers = None
    if isinstance(exc, AuthRequired):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=exc.http_status,
        detail={"code": exc.code, "message": exc.user_message},
        headers=headers,
    )
