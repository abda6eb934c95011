from dataclasses import dataclass, field
from typing import Any, Dict

from fastapi import HTTPException


@dataclass
class ServiceError(Exception):
    """Consistent service-layer exception with HTTP-friendly metadata."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": {
                    "code": self.code,
                    "message": self.message,
                    "details": self.details,
                }
            },
        )


def not_found(what: str, identifier: Any) -> ServiceError:
    return ServiceError(404, "NOT_FOUND", f"{what} '{identifier}' not found.", {})
