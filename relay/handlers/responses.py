"""JSON bodies for the HTTP endpoints.

Every outcome is returned with HTTP 200 and a ``status`` field so phone
clients only ever parse the body.
"""

from __future__ import annotations

from typing import Any

from relay.errors import RelayError


def ok_body(**fields: Any) -> dict[str, Any]:
    return {"status": "ok", **fields}


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"status": "error", "code": code, "message": message}


def relay_error_body(exc: RelayError) -> dict[str, Any]:
    return error_body(exc.code, exc.message)


__all__ = ["error_body", "ok_body", "relay_error_body"]
