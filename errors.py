"""
Error taxonomy for the AI endpoints and classification of model provider failures.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional

import anthropic

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    INPUT_INVALID = "input_invalid"
    CONFIGURATION_MISSING = "configuration_missing"
    MODEL_AUTH_FAILED = "model_auth_failed"
    MODEL_NOT_FOUND = "model_not_found"
    MODEL_RATE_LIMITED = "model_rate_limited"
    MODEL_BAD_REQUEST = "model_bad_request"
    MODEL_OUTPUT_INVALID = "model_output_invalid"
    NETWORK_FAILURE = "network_failure"
    UNCLASSIFIED = "unclassified"


STATUS_CODES = {
    ErrorKind.INPUT_INVALID: 400,
    ErrorKind.CONFIGURATION_MISSING: 500,
    ErrorKind.MODEL_AUTH_FAILED: 500,
    ErrorKind.MODEL_NOT_FOUND: 500,
    ErrorKind.MODEL_RATE_LIMITED: 429,
    ErrorKind.MODEL_BAD_REQUEST: 400,
    ErrorKind.MODEL_OUTPUT_INVALID: 502,
    ErrorKind.NETWORK_FAILURE: 500,
    ErrorKind.UNCLASSIFIED: 500,
}


class AssistError(Exception):
    """A classified failure that the HTTP layer turns into an error payload"""

    def __init__(self, kind: ErrorKind, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_payload(self, include_detail: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if include_detail and self.detail:
            payload["details"] = self.detail
        return payload


def input_invalid(message: str) -> AssistError:
    return AssistError(ErrorKind.INPUT_INVALID, message)


def _redact(text: str, api_key: Optional[str]) -> str:
    if api_key:
        return text.replace(api_key, "***")
    return text


def _auth_failed() -> AssistError:
    return AssistError(
        ErrorKind.MODEL_AUTH_FAILED,
        "The AI API key is invalid. Check the ANTHROPIC_API_KEY environment variable."
    )


def _not_found(message: str) -> AssistError:
    return AssistError(
        ErrorKind.MODEL_NOT_FOUND,
        f"The AI model could not be found. Check the model name. ({message})",
        detail=message
    )


def _rate_limited() -> AssistError:
    return AssistError(
        ErrorKind.MODEL_RATE_LIMITED,
        "The API rate limit was exceeded. Please try again later."
    )


def _bad_request(message: str) -> AssistError:
    return AssistError(
        ErrorKind.MODEL_BAD_REQUEST,
        f"Input validation failed: {message}",
        detail=message
    )


def _network_failure(message: str) -> AssistError:
    return AssistError(
        ErrorKind.NETWORK_FAILURE,
        "A network error occurred while contacting the AI service.",
        detail=message
    )


def _unclassified(message: str) -> AssistError:
    return AssistError(
        ErrorKind.UNCLASSIFIED,
        "An error occurred while processing the AI request.",
        detail=message
    )


def _from_status(status: int, message: str) -> Optional[AssistError]:
    if status in (401, 403):
        return _auth_failed()
    if status == 404:
        return _not_found(message)
    if status == 429:
        return _rate_limited()
    if status in (400, 422):
        return _bad_request(message)
    return None


def _from_message(message: str) -> AssistError:
    lower = message.lower()

    if (
        "api key" in lower
        or "api_key" in lower
        or "authentication" in lower
        or "unauthorized" in lower
        or "401" in message
        or "UNAUTHENTICATED" in message
    ):
        return _auth_failed()

    if (
        ("model" in lower and "not found" in lower)
        or "model_not_found" in lower
        or "invalid model" in lower
        or "404" in message
    ):
        return _not_found(message)

    if (
        "429" in message
        or "RESOURCE_EXHAUSTED" in message
        or ("quota" in lower and "exceeded" in lower)
        or ("rate limit" in lower and "exceeded" in lower)
    ):
        return _rate_limited()

    if (
        "400" in message
        or "INVALID_ARGUMENT" in message
        or "validation" in lower
        or "bad request" in lower
    ):
        return _bad_request(message)

    if (
        "network" in lower
        or "fetch" in lower
        or "connection" in lower
        or "timeout" in lower
        or "timed out" in lower
        or "ECONNREFUSED" in message
    ):
        return _network_failure(message)

    return _unclassified(message)


def classify_provider_error(exc: BaseException, api_key: Optional[str] = None) -> AssistError:
    """
    Map a failure raised by the model call onto the error taxonomy.

    SDK exception types are checked first, then HTTP status codes, then the
    message text. Every stage keeps the same order: auth, model identity,
    rate limit, bad input, network, anything else.
    """
    if isinstance(exc, AssistError):
        return exc

    message = _redact(str(exc) or exc.__class__.__name__, api_key)

    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        error = _auth_failed()
    elif isinstance(exc, anthropic.NotFoundError):
        error = _not_found(message)
    elif isinstance(exc, anthropic.RateLimitError):
        error = _rate_limited()
    elif isinstance(exc, (anthropic.BadRequestError, anthropic.UnprocessableEntityError)):
        error = _bad_request(message)
    elif isinstance(exc, anthropic.APIConnectionError):
        error = _network_failure(message)
    else:
        status = getattr(exc, "status_code", None)
        error = _from_status(status, message) if isinstance(status, int) else None
        if error is None:
            error = _from_message(message)

    logger.error(f"❌ Model call failed ({error.kind.name}): {message}")
    return error
