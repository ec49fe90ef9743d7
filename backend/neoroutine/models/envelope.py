"""
Typed API response envelope

Every route answers with {success, message, data}. decode_envelope is the one
place clients unwrap a response body.
"""
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from neoroutine.core.exceptions import ApiEnvelopeError

T = TypeVar("T")


class ApiEnvelope(BaseModel, Generic[T]):
    """Standard response wrapper"""
    success: bool = True
    message: str = "Success"
    data: Optional[T] = None


def decode_envelope(payload: Any, status_code: int = 200) -> Any:
    """
    Unwrap a response body to its data

    Args:
        payload: Parsed JSON body
        status_code: HTTP status of the response

    Returns:
        The envelope's data, or the payload itself when it is not wrapped

    Raises:
        ApiEnvelopeError: If the response reports failure
    """
    if isinstance(payload, dict):
        failed = payload.get("success") is False or status_code >= 400
        if failed:
            message = payload.get("message") or payload.get("detail") or f"HTTP {status_code}"
            raise ApiEnvelopeError(str(message), status_code)
        if "data" in payload and ("success" in payload or "message" in payload):
            return payload["data"]
        return payload

    if status_code >= 400:
        raise ApiEnvelopeError(f"HTTP {status_code}", status_code)
    return payload
