"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`; keyword extras are merged into the payload."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra or None)


def not_found(message: str, **extra: Any) -> tuple[Any, int]:
    return problem_response("not_found", status=404, message=message, **extra).to_response()


def bad_request(message: str, **extra: Any) -> tuple[Any, int]:
    return problem_response("bad_request", status=400, message=message, **extra).to_response()


__all__ = ["ProblemResponse", "bad_request", "not_found", "problem_response"]
