import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Dict, TypeVar, Union

from flask import jsonify

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_MEDIA = "invalid_media"
    IMAGE_NOT_SET = "image_not_set"
    INVALID_INPUT = "invalid_input"


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INVALID_MEDIA: 400,
    ErrorKind.IMAGE_NOT_SET: 404,
    ErrorKind.INVALID_INPUT: 400,
}


@dataclass(frozen=True)
class Failure:
    """Outcome of a core operation that did not succeed.

    Core operations return a ``Failure`` instead of raising, so callers can
    tell the kinds apart without catching anything.
    """

    kind: ErrorKind
    message: str


Result = Union[T, Failure]


class APIError(Exception):
    def __init__(self, message: str, status_code: int = 400, extra: Dict[str, Any] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.extra = extra or {}


def raise_for_failure(result: Result[T]) -> T:
    if isinstance(result, Failure):
        raise APIError(result.message, STATUS_CODES[result.kind], {"kind": result.kind.value})
    return result


def handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIError as api_err:
            logger.warning("API error: %s", api_err)
            response = {"error": str(api_err)}
            response.update(api_err.extra)
            return jsonify(response), api_err.status_code
        except Exception:  # noqa: BLE001
            logger.exception("Unhandled error")
            return jsonify({"error": "Internal server error"}), 500

    return wrapper


def parse_device_id(raw: Any) -> Result[int]:
    if isinstance(raw, bool):
        return Failure(ErrorKind.INVALID_INPUT, "id must be an integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return Failure(ErrorKind.INVALID_INPUT, "id must be an integer")


def require_string(value: Any, field: str) -> Result[str]:
    if not isinstance(value, str) or not value.strip():
        return Failure(ErrorKind.INVALID_INPUT, f"{field} is missing or invalid")
    return value
