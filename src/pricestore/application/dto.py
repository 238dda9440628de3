"""Data Transfer Objects: plain containers that cross layer boundaries.

The web layer hands handlers a mapping of query parameters and gets a
HandlerResponse back; neither side sees the other's types.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus


@dataclass(frozen=True)
class HandlerResponse:
    """Output: status code plus plain-text body."""

    status: int
    body: str

    @classmethod
    def ok(cls, body: str) -> HandlerResponse:
        return cls(HTTPStatus.OK, body)
