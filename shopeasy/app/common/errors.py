from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class StorefrontError(Exception):
    """Base class for errors surfaced to the shopper as a flash message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GatewayError(StorefrontError):
    """The remote API call failed (network, non-2xx or unreadable body)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(StorefrontError):
    """Required form fields were left blank."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__("Please fill in all required fields")
        self.missing = list(missing)


@dataclass
class ErrorPayload:
    """Consistent JSON error body for the serving process."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "request_id": request_id,
            }
        }
